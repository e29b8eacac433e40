"""
hatunpack — decoder for `.hat` cosmetic containers.

Architecture:
    Simple:   int64 magic + record (reserved, team name, image size, image)
    Complex:  int32 IV length + IV + AES-CBC ciphertext of the base section
    Base:     int64 base-key magic + [sized string] + record
"""

__version__ = "0.1.0"

# AES-128 key for base section decryption. Must stay byte-for-byte identical.
HAT_AES_BASE_KEY = bytes.fromhex("f316982001f47a6f612a0d02130f2de6")
HAT_AES_BLOCK_SIZE = 16

# Top-level discriminant for Simple containers
HAT_SIMPLE_MAGIC = 630430777029345

# Base-key magics found in the first 8 bytes of a decrypted base section
HAT_PLAIN_BASE_MAGICS = frozenset({402965919293045, 630430777029345})
HAT_SPECIFIC_BASE_MAGICS = frozenset({630449177029345, 465665919293045})

# Input limits
MAX_FILE_SIZE = 16 * 1024 * 1024  # 16 MiB, hats are small PNGs

# File naming
IMAGE_EXTENSION = ".png"
BASE_EXTENSION = ".base"
OUTPUT_DIR_ENV = "HATUNPACK_OUTPUT_DIR"

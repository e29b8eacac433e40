"""
Base section decryption for Complex hat containers.

- Cipher: AES-128-CBC with the fixed base key (requires `cryptography` package)
- Padding: PKCS7, stripped only when well-formed

The `cryptography` package is lazily imported so that Simple containers and
the field parsers work without it.
"""

from __future__ import annotations

import logging

from hatunpack import HAT_AES_BASE_KEY, HAT_AES_BLOCK_SIZE
from hatunpack._format.reader import StructuralError, extract_iv

log = logging.getLogger(__name__)


def _import_cryptography():
    """Lazily import the cryptography cipher primitives.

    Raises ImportError with a helpful message if not installed.
    """
    try:
        from cryptography.hazmat.primitives import padding
        from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

        return Cipher, algorithms, modes, padding
    except ImportError:
        raise ImportError(
            "cryptography is required to decrypt hat base sections. "
            "Install with: pip install hatunpack"
        )


def decrypt_cbc(ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
    """Decrypt AES-CBC ciphertext and strip PKCS7 padding if present.

    Malformed padding is left in place rather than rejected: a wrong key
    produces garbage padding, and the base-key check reports that case.

    Raises:
        StructuralError: If the IV or ciphertext length is not block aligned.
    """
    Cipher, algorithms, modes, padding = _import_cryptography()

    if len(iv) != HAT_AES_BLOCK_SIZE:
        raise StructuralError(f"IV must be {HAT_AES_BLOCK_SIZE} bytes, got {len(iv)}")
    if not ciphertext or len(ciphertext) % HAT_AES_BLOCK_SIZE:
        raise StructuralError(
            f"Ciphertext length {len(ciphertext)} is not a positive multiple "
            f"of {HAT_AES_BLOCK_SIZE}"
        )

    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    plain = decryptor.update(ciphertext) + decryptor.finalize()

    unpadder = padding.PKCS7(HAT_AES_BLOCK_SIZE * 8).unpadder()
    try:
        return unpadder.update(plain) + unpadder.finalize()
    except ValueError:
        log.debug("Decrypted section has no valid PKCS7 padding, keeping %d bytes", len(plain))
        return plain


def decrypt_base(buffer: bytes, key: bytes = HAT_AES_BASE_KEY) -> bytes:
    """Decrypt the base section of a Complex container.

    Args:
        buffer: The whole container (IV length + IV + ciphertext).
        key: 16-byte AES key. Defaults to the fixed hat base key.

    Returns:
        The decrypted base section.
    """
    iv, iv_end = extract_iv(buffer)
    log.debug("Decrypting base section: IV %d bytes, ciphertext %d bytes", len(iv), len(buffer) - iv_end)
    return decrypt_cbc(bytes(buffer[iv_end:]), key, iv)

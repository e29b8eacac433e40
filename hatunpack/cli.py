"""
hatunpack CLI — extract team names and images from `.hat` containers.

Commands:
  hatunpack decode  - Decode a .hat file and write its image (.png)
  hatunpack base    - Write the decrypted base section of a Complex .hat file
  hatunpack info    - Show variant, team name and image size of a .hat file
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


def _input_path(path: str) -> Path:
    """Resolve the input file or exit with an error."""
    p = Path(path)
    if not p.is_file():
        print(f"Error: File not found: {p}", file=sys.stderr)
        sys.exit(1)
    return p


def _output_path(args: argparse.Namespace, path: Path, suffix: str) -> Path:
    """Pick the output path for ``path``.

    Priority: -o/--output > HATUNPACK_OUTPUT_DIR env var > next to the input.
    """
    from hatunpack import OUTPUT_DIR_ENV

    if getattr(args, "output", None):
        return Path(args.output)
    out_dir = os.environ.get(OUTPUT_DIR_ENV, "")
    name = path.with_suffix(suffix).name
    if out_dir:
        return Path(out_dir) / name
    return path.with_suffix(suffix)


def cmd_decode(args: argparse.Namespace) -> None:
    """Decode a .hat file and export its image payload."""
    from hatunpack import IMAGE_EXTENSION
    from hatunpack._format.reader import DecodeError
    from hatunpack.decoder import decode_file, export_record

    path = _input_path(args.path)
    try:
        record = decode_file(path)
    except (DecodeError, ValueError) as e:
        print(f"Error: Decoding {path.name} failed: {e}", file=sys.stderr)
        sys.exit(1)

    out_path = _output_path(args, path, IMAGE_EXTENSION)
    try:
        written = export_record(out_path, record)
    except OSError as e:
        print(f"Error: Writing {out_path} failed: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Decoded {path} -> {out_path} ({written} bytes)")
    print(f"  team: {record.label}")


def cmd_base(args: argparse.Namespace) -> None:
    """Export the decrypted base section of a Complex .hat file."""
    from hatunpack import BASE_EXTENSION
    from hatunpack._format.reader import DecodeError
    from hatunpack.decoder import decode_base_file, export_base

    path = _input_path(args.path)
    try:
        base = decode_base_file(path)
    except (DecodeError, ValueError) as e:
        print(f"Error: Decrypting {path.name} failed: {e}", file=sys.stderr)
        sys.exit(1)

    out_path = _output_path(args, path, BASE_EXTENSION)
    try:
        written = export_base(out_path, base)
    except OSError as e:
        print(f"Error: Writing {out_path} failed: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Decrypted base section {path} -> {out_path} ({written} bytes)")


def cmd_info(args: argparse.Namespace) -> None:
    """Print what a .hat file contains without writing anything."""
    from hatunpack._format.reader import DecodeError
    from hatunpack.decoder import decode_file

    path = _input_path(args.path)
    try:
        record = decode_file(path)
    except (DecodeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"File:     {path}")
    print(f"Variant:  {record.variant.name.lower()}")
    if record.base_key is not None:
        print(f"Base key: {record.base_key}")
    print(f"Team:     {record.label}")
    print(f"Image:    {record.declared_payload_length} bytes")


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="hatunpack",
        description="Decode .hat cosmetic containers into team name and image.",
    )
    from hatunpack import __version__
    parser.add_argument("--version", action="version", version=f"hatunpack {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    # decode
    p_decode = sub.add_parser("decode", help="Decode a .hat file and write its image")
    p_decode.add_argument("path", help="Path to .hat file")
    p_decode.add_argument("-o", "--output", help="Output image path (default: <name>.png)")

    # base
    p_base = sub.add_parser("base", help="Write the decrypted base section")
    p_base.add_argument("path", help="Path to .hat file")
    p_base.add_argument("-o", "--output", help="Output path (default: <name>.base)")

    # info
    p_info = sub.add_parser("info", help="Show variant, team name and image size")
    p_info.add_argument("path", help="Path to .hat file")

    args = parser.parse_args()

    if not args.command:
        print("hatunpack — decode .hat cosmetic containers")
        print()
        print("Usage:")
        print("  hatunpack decode file.hat [-o image.png]")
        print("  hatunpack base file.hat [-o file.base]")
        print("  hatunpack info file.hat")
        print()
        print("Run 'hatunpack <command> --help' for details on any command.")
        sys.exit(0)

    _setup_logging(args.verbose)

    commands = {
        "decode": cmd_decode,
        "base": cmd_base,
        "info": cmd_info,
    }

    commands[args.command](args)


if __name__ == "__main__":
    main()

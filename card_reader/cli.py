"""
Command line card reader.

Usage:
    card-reader export card.png --output-dir exports/
    card-reader show card.png
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .cards import CardReadError, CharacterCardExporter, ExportBundle, read_card

logger = logging.getLogger(__name__)


def _read_bundle(png_path: Path, verify_crc: bool) -> ExportBundle:
    if not png_path.is_file():
        raise SystemExit(f"Image not found: {png_path}")
    try:
        return read_card(png_path.read_bytes(), verify_crc=verify_crc)
    except CardReadError as e:
        raise SystemExit(f"Failed to read card from {png_path}: {e}")


def _export(args: argparse.Namespace) -> int:
    bundle = _read_bundle(Path(args.image), args.verify_crc)

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    json_name, txt_name = CharacterCardExporter.export_filenames(bundle)
    json_path = output_dir / json_name
    txt_path = output_dir / txt_name
    json_path.write_text(bundle.raw_json, encoding="utf-8")
    txt_path.write_text(bundle.readable_text, encoding="utf-8")

    logger.info(f"Wrote {json_path} and {txt_path}")
    print(json_path)
    print(txt_path)
    return 0


def _show(args: argparse.Namespace) -> int:
    bundle = _read_bundle(Path(args.image), args.verify_crc)
    sys.stdout.write(bundle.raw_json + "\n" if args.json else bundle.readable_text)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Extract SillyTavern character cards embedded in PNG images."
    )
    parser.add_argument("--verify-crc", action="store_true", help="Reject PNG chunks with bad CRCs")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Write JSON and readable text exports")
    export_parser.add_argument("image", help="Path to the card PNG")
    export_parser.add_argument("--output-dir", default=".", help="Directory for the export files")
    export_parser.set_defaults(func=_export)

    show_parser = subparsers.add_parser("show", help="Print the card to stdout")
    show_parser.add_argument("image", help="Path to the card PNG")
    show_parser.add_argument("--json", action="store_true", help="Print the raw JSON instead")
    show_parser.set_defaults(func=_show)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

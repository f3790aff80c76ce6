"""Command line interface for generating SVG QR codes."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from . import generator
from .errors import QrCodeError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="qr_svg", description="Generate QR codes as SVG markup")
    data_group = parser.add_mutually_exclusive_group(required=True)
    data_group.add_argument("--text", help="Literal text/URL to encode")
    data_group.add_argument("--file", type=Path, help="Read the payload from a file")

    parser.add_argument("-o", "--output", type=Path, default=Path("qr_code.svg"), help="Output SVG file path")
    parser.add_argument("--dark", action="store_true", help="Render light modules on a dark background")
    parser.add_argument("--module-size", type=int, default=8, help="Side of a single module in pixels")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log encoder decisions")
    return parser


def resolve_payload(parser: argparse.ArgumentParser, args: argparse.Namespace) -> str:
    if args.text is not None:
        return args.text
    if args.file is not None:
        try:
            return args.file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            parser.error(f"cannot read {args.file}: {exc}")
    raise SystemExit("No payload provided")


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(message)s",
    )
    if args.module_size <= 0:
        parser.error("--module-size must be positive")
    payload = resolve_payload(parser, args)
    try:
        svg_text = generator.generate_qr(payload, dark=args.dark, module_size=args.module_size)
    except QrCodeError as exc:
        parser.error(str(exc))
    args.output.write_text(svg_text, encoding="utf-8")
    parser.exit(0, f"Saved SVG to {args.output}\n")


if __name__ == "__main__":
    main()

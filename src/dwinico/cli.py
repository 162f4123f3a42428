#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
命令行入口

Usage:

    # 解包 9.ICO 到 out 目录
    dwinico extract 9.ICO -o out

    # 将 out 目录中的 "<index>_*.jpg" 打包为 out.ICO
    dwinico create out

    # 列出目录条目
    dwinico list 9.ICO --json
"""

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from .archive import IcoBuilder, IcoReader
from .converter import IcoJsonConverter
from .exceptions import DwinIcoError
from .utils import load_name_table

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dwinico",
        description="Dissect and create DWIN .ICO icon containers."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="enable debug logging"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_extract = sub.add_parser("extract", help="extract all icons from an .ICO file")
    p_extract.add_argument("input", help="path to the .ICO file")
    p_extract.add_argument("-o", "--output", default="out", help="output directory")
    p_extract.add_argument(
        "--names", default=None,
        help='JSON file mapping index to icon name, e.g. {"0": "ICON_LOGO"}'
    )

    p_create = sub.add_parser("create", help="create an .ICO file from a directory")
    p_create.add_argument("input", help='directory of "<index>_<name>.jpg" files')
    p_create.add_argument(
        "-o", "--output", default=None, help="output file (default: <dirname>.ICO)"
    )

    p_list = sub.add_parser("list", help="list the directory entries of an .ICO file")
    p_list.add_argument("input", help="path to the .ICO file")
    p_list.add_argument("--json", action="store_true", help="print JSON instead of text")

    return parser


def extract_ico(ico_path: str, output_dir: str, names_path: Optional[str] = None) -> int:
    if os.path.splitext(ico_path)[1].upper() != ".ICO":
        raise ValueError("File extension must be .ICO")

    name_table = load_name_table(names_path) if names_path else None
    with IcoReader(ico_path) as reader:
        result = reader.extract_all(output_dir, name_table=name_table)

    print(
        f"Extracted {result.success_count} icons into \"{output_dir}\" "
        f"({result.skipped_count} skipped, {result.failed_count} failed)."
    )
    return 0 if result.failed_count == 0 else 1


def create_ico(icon_dir: str, output_path: Optional[str] = None) -> int:
    if output_path is None:
        dir_name = os.path.basename(os.path.normpath(icon_dir))
        output_path = dir_name + ".ICO"

    print(f"Creating {output_path}...")
    builder = IcoBuilder(output_path)
    builder.add_dir(icon_dir)
    builder.build()
    print(f"Output file is \"{output_path}\" with {builder.entry_count} icons.")
    return 0


def list_ico(ico_path: str, as_json: bool = False) -> int:
    if as_json:
        print(json.dumps(IcoJsonConverter.ico_to_dict(ico_path), indent=2))
        return 0

    with IcoReader(ico_path) as reader:
        for index, entry in enumerate(reader.entries):
            if not entry.is_empty:
                print(f"Index: {index} - {entry}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s"
    )

    try:
        if args.command == "extract":
            return extract_ico(args.input, args.output, args.names)
        elif args.command == "create":
            return create_ico(args.input, args.output)
        elif args.command == "list":
            return list_ico(args.input, args.json)
        else:
            parser.error(f"Unknown command: {args.command}")
    except (DwinIcoError, OSError, ValueError) as e:
        logger.debug("command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

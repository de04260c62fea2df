from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Sequence

import redline2text
from redline2text.extractors.data_types import ChangeType, TrackedChangesContent
from redline2text.extractors.serialization import serialize_extraction


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="redline2text",
        description=(
            "Extract tracked changes from a Word document and emit its full text "
            "to stdout (or the change list with --changes, or JSON with --json)."
        ),
    )
    parser.add_argument(
        "path",
        type=Path,
        help="Path to the .docx file to extract.",
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--json",
        action="store_true",
        help="Emit the full text and all tracked changes as structured JSON.",
    )
    output.add_argument(
        "--changes",
        action="store_true",
        help="Emit one line per tracked change instead of the full text.",
    )
    return parser


def _format_change_lines(result: TrackedChangesContent) -> str:
    lines = []
    for item in result.items:
        body = item.comment_content if item.kind == ChangeType.COMMENT else item.text
        author = f" ({item.author})" if item.author else ""
        lines.append(
            f"[{item.paragraph_index}] {item.kind.value} {item.id}{author}: {body}"
        )
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    try:
        args, unknown = parser.parse_known_args(argv)
    except SystemExit as exc:
        code = exc.code if isinstance(exc.code, int) else 1
        return code

    if unknown:
        unknown_str = " ".join(unknown)
        print(
            f"redline2text: warning: unsupported arguments: {unknown_str}",
            file=sys.stderr,
        )
        return 1

    try:
        results = list(redline2text.read_file(args.path))
        if not results:
            raise RuntimeError(f"No extraction results for {args.path}")
        result = results[0]
        if args.json:
            json.dump(serialize_extraction(result), sys.stdout)
            sys.stdout.write("\n")
        elif args.changes:
            if not result.items:
                print(
                    f"redline2text: no tracked changes found in {args.path}",
                    file=sys.stderr,
                )
            else:
                sys.stdout.write(_format_change_lines(result))
                sys.stdout.write("\n")
        else:
            sys.stdout.write(result.get_full_text().rstrip())
            sys.stdout.write("\n")
        return 0
    except Exception as exc:
        print(f"redline2text: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

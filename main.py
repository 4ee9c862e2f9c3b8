from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from casereport.config import get_settings
from casereport.exporter import ExportService
from casereport.report.pipeline import DEFAULT_SECTION_ORDER
from casereport.storage import read_json
from casereport.types import CaseReport


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _split_sections(raw: str | None) -> list[str] | None:
    if raw is None:
        return None
    return [item.strip() for item in raw.split(',') if item.strip()]


def cmd_export(args: argparse.Namespace) -> int:
    report_path = Path(args.report).expanduser().resolve()
    if not report_path.exists() or not report_path.is_file():
        _print_json({'status': 'error', 'message': f'Report data not found: {report_path}'})
        return 2

    try:
        report = CaseReport.model_validate(read_json(report_path))
    except json.JSONDecodeError as exc:
        _print_json({'status': 'error', 'message': f'Report data is not valid JSON: {exc}'})
        return 2
    except ValidationError as exc:
        _print_json(
            {
                'status': 'error',
                'message': 'Report data failed validation',
                'errors': json.loads(exc.json()),
            }
        )
        return 2

    output_dir = Path(args.output_dir).expanduser().resolve() if args.output_dir else None
    result = ExportService().export(
        report,
        sections=_split_sections(args.sections),
        output_dir=output_dir,
        page_format=args.page_format,
    )
    _print_json({'status': 'ok' if result.success else 'error', **result.model_dump(mode='json')})
    return 0 if result.success else 1


def cmd_sections(args: argparse.Namespace) -> int:
    _print_json({'sections': list(DEFAULT_SECTION_ORDER)})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Case report PDF export CLI')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    sub = parser.add_subparsers(dest='command', required=True)

    export = sub.add_parser('export', help='Render a case report JSON file to PDF')
    export.add_argument('--report', required=True, help='Path to case report JSON file')
    export.add_argument('--output-dir', default=None, help='Output directory (default: REPORT_OUTPUT_DIR)')
    export.add_argument(
        '--sections',
        default=None,
        help=f"Comma-separated section order (default: {','.join(DEFAULT_SECTION_ORDER)})",
    )
    export.add_argument('--page-format', default=None, choices=['A4', 'LETTER', 'a4', 'letter'])
    export.set_defaults(func=cmd_export)

    sections = sub.add_parser('sections', help='List report sections in default order')
    sections.set_defaults(func=cmd_sections)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )
    get_settings()
    return int(args.func(args))


if __name__ == '__main__':
    raise SystemExit(main())

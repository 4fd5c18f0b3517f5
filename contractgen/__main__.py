#!/usr/bin/env python3
"""
ContractGen CLI

Command-line interface for the contract schedule engine.

Usage:
    python -m contractgen load-csv <path>
    python -m contractgen load-sheet <url>
    python -m contractgen evaluate --record <json> --condition <json>
    python -m contractgen render-block --record <json> --block <json>
    python -m contractgen placeholders --template <path>
    python -m contractgen merge --template <path> --record <json> --blocks <json> --mappings <json>
    python -m contractgen preview --template <path> --data <json> --blocks <json> --mappings <json>
    python -m contractgen generate --template <path> --data <json> --blocks <json> --mappings <json> [--output-dir <dir>] [--dry-run]

JSON arguments may be given inline or as @path/to/file.json.
All commands output JSON to stdout.
"""

import argparse
import json
import logging
import sys
from datetime import date
from typing import Any


def output_json(data: Any, success: bool = True) -> None:
    """Output JSON response to stdout."""
    response = {
        "success": success,
        "data": data if success else None,
        "error": None if success else data,
    }
    print(json.dumps(response, indent=2, ensure_ascii=False))


def _load_json_arg(value: str, default: Any = None) -> Any:
    if not value:
        return default
    if value.startswith("@"):
        with open(value[1:], "r", encoding="utf-8") as f:
            return json.load(f)
    return json.loads(value)


def _records_arg(value: str) -> list:
    data = _load_json_arg(value, [])
    if isinstance(data, dict):
        # Same shape load-csv emits
        data = data.get("rows", data.get("records", []))
    return data


def _build_merger(args: argparse.Namespace):
    from contractgen.merge import TemplateMerger
    from contractgen.stores import BlockStore, MappingRegistry

    settings = args.settings
    blocks = BlockStore.from_dicts(_load_json_arg(args.blocks, []))
    mappings = MappingRegistry.from_dict(_load_json_arg(args.mappings, {}))
    return TemplateMerger(
        blocks,
        mappings,
        extension_key=settings.extension_key,
        money_hints=settings.money_hints,
        value_header=settings.value_header,
    )


def cmd_load_csv(args: argparse.Namespace) -> None:
    """Load provider CSV and return records + headers."""
    from contractgen.data_sources import load_csv

    try:
        rows, headers = load_csv(args.path)
        output_json({"rows": rows, "headers": headers, "count": len(rows)})
    except Exception as e:
        output_json(str(e), success=False)


def cmd_load_sheet(args: argparse.Namespace) -> None:
    """Load Google Sheet and return records + headers."""
    from contractgen.data_sources import load_google_sheet

    try:
        rows, headers = load_google_sheet(args.url)
        output_json({"rows": rows, "headers": headers, "count": len(rows)})
    except Exception as e:
        output_json(str(e), success=False)


def cmd_evaluate(args: argparse.Namespace) -> None:
    """Evaluate one condition against one record."""
    from contractgen.evaluator import evaluate
    from contractgen.models import Condition
    from contractgen.resolver import FieldResolver

    try:
        record = _load_json_arg(args.record, {})
        condition = Condition.from_dict(_load_json_arg(args.condition, {}))
        resolver = FieldResolver(record, extension_key=args.settings.extension_key)
        res = resolver.resolve(condition.field)
        output_json({
            "result": evaluate(condition, resolver),
            "found": res.found,
            "value": res.value,
            "matched_name": res.matched_name,
        })
    except Exception as e:
        output_json(str(e), success=False)


def cmd_render_block(args: argparse.Namespace) -> None:
    """Collect and render one dynamic block for one record."""
    from contractgen.collector import collect_block
    from contractgen.models import DynamicBlock
    from contractgen.renderer import render
    from contractgen.resolver import FieldResolver

    try:
        record = _load_json_arg(args.record, {})
        block = DynamicBlock.from_dict(_load_json_arg(args.block, {}))
        resolver = FieldResolver(record, extension_key=args.settings.extension_key)
        items = collect_block(block, record, resolver=resolver)
        html = render(items, args.output_type or block.output_type, value_header=args.settings.value_header)
        output_json({"items": [i.to_dict() for i in items], "html": html})
    except Exception as e:
        output_json(str(e), success=False)


def cmd_placeholders(args: argparse.Namespace) -> None:
    """List the placeholders a template uses."""
    from contractgen.merge import placeholders
    from contractgen.templates import load_template

    try:
        template_id, text = load_template(args.template)
        output_json({"template_id": template_id, "placeholders": placeholders(text)})
    except Exception as e:
        output_json(str(e), success=False)


def cmd_merge(args: argparse.Namespace) -> None:
    """Merge a template with one record."""
    from contractgen.templates import load_template

    try:
        template_id, text = load_template(args.template)
        merger = _build_merger(args)
        result = merger.merge(args.template_id or template_id, text, _load_json_arg(args.record, {}))
        output_json({"content": result.content, "unresolved": result.unresolved})
    except Exception as e:
        output_json(str(e), success=False)


def cmd_preview(args: argparse.Namespace) -> None:
    """Build preview rows for every record."""
    from contractgen.preview import build_preview_rows
    from contractgen.templates import load_template

    try:
        template_id, text = load_template(args.template)
        preview_rows = build_preview_rows(
            records=_records_arg(args.data),
            template_id=args.template_id or template_id,
            template_text=text,
            merger=_build_merger(args),
            contract_year=args.year,
            run_date=args.run_date,
        )
        output_json({"preview_rows": preview_rows, "count": len(preview_rows)})
    except Exception as e:
        output_json(str(e), success=False)


def cmd_generate(args: argparse.Namespace) -> None:
    """Write one merged HTML document per record."""
    from contractgen.generator import generate_documents
    from contractgen.templates import load_template

    try:
        template_id, text = load_template(args.template)
        summary = generate_documents(
            records=_records_arg(args.data),
            template_id=args.template_id or template_id,
            template_text=text,
            merger=_build_merger(args),
            output_dir=args.output_dir or args.settings.output_dir,
            contract_year=args.year,
            run_date=args.run_date,
            dry_run=args.dry_run,
        )
        output_json(summary.to_dict())
    except Exception as e:
        output_json(str(e), success=False)


def _add_merge_inputs(p: argparse.ArgumentParser) -> None:
    p.add_argument("--template", required=True, help="Path to .html or .md template")
    p.add_argument("--template-id", help="Template id used for mapping lookup (default: file stem)")
    p.add_argument("--blocks", default="[]", help="JSON array of dynamic blocks")
    p.add_argument("--mappings", default="{}", help="JSON object of templateId -> mappings")


def _add_batch_inputs(p: argparse.ArgumentParser) -> None:
    today = date.today()
    p.add_argument("--data", required=True, help="JSON array of records (or load-csv output)")
    p.add_argument("--year", default=str(today.year), help="Contract year used in file names")
    p.add_argument("--run-date", default=today.isoformat(), help="Run date used in file names")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contractgen",
        description="ContractGen CLI - contract schedule merge engine",
    )
    parser.add_argument("--settings-file", help="Path to settings JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # load-csv
    p_csv = subparsers.add_parser("load-csv", help="Load provider records from CSV file")
    p_csv.add_argument("path", help="Path to CSV file")
    p_csv.set_defaults(func=cmd_load_csv)

    # load-sheet
    p_sheet = subparsers.add_parser("load-sheet", help="Load provider records from Google Sheet")
    p_sheet.add_argument("url", help="Google Sheets URL")
    p_sheet.set_defaults(func=cmd_load_sheet)

    # evaluate
    p_eval = subparsers.add_parser("evaluate", help="Evaluate one condition against a record")
    p_eval.add_argument("--record", required=True, help="JSON record")
    p_eval.add_argument("--condition", required=True, help="JSON condition")
    p_eval.set_defaults(func=cmd_evaluate)

    # render-block
    p_render = subparsers.add_parser("render-block", help="Render a dynamic block for a record")
    p_render.add_argument("--record", required=True, help="JSON record")
    p_render.add_argument("--block", required=True, help="JSON dynamic block")
    p_render.add_argument("--output-type", help="Override the block's output type")
    p_render.set_defaults(func=cmd_render_block)

    # placeholders
    p_ph = subparsers.add_parser("placeholders", help="List template placeholders")
    p_ph.add_argument("--template", required=True, help="Path to .html or .md template")
    p_ph.set_defaults(func=cmd_placeholders)

    # merge
    p_merge = subparsers.add_parser("merge", help="Merge a template with one record")
    _add_merge_inputs(p_merge)
    p_merge.add_argument("--record", required=True, help="JSON record")
    p_merge.set_defaults(func=cmd_merge)

    # preview
    p_preview = subparsers.add_parser("preview", help="Preview merge results for many records")
    _add_merge_inputs(p_preview)
    _add_batch_inputs(p_preview)
    p_preview.set_defaults(func=cmd_preview)

    # generate
    p_gen = subparsers.add_parser("generate", help="Write merged HTML documents")
    _add_merge_inputs(p_gen)
    _add_batch_inputs(p_gen)
    p_gen.add_argument("--output-dir", help="Destination folder (default: settings output_dir)")
    p_gen.add_argument("--dry-run", action="store_true", help="Don't write files, just count")
    p_gen.set_defaults(func=cmd_generate)

    return parser


def main(argv=None) -> None:
    from contractgen.settings import load_settings

    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args.settings = load_settings(args.settings_file)
    args.func(args)


if __name__ == "__main__":
    main()

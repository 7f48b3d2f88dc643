"""CLI entrypoint."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .config.settings import get_settings
from .core.exceptions import StepflowException
from .flowchart import Flowchart, generate_flowchart
from .pages import PageStore
from .storage import read_document, reconstruct_prompt, save_document
from .utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _summarize(flowchart: Flowchart) -> str:
    lines = []
    for node in flowchart.nodes:
        flags = []
        if node.is_start:
            flags.append("start")
        if node.is_end:
            flags.append("end")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        lines.append(f"{node.id}  level={node.level}  ({node.x:g}, {node.y:g})  {node.label}{suffix}")
    for edge in flowchart.edges:
        lines.append(f"{edge.source} -> {edge.target}  ({edge.kind})")
    return "\n".join(lines)


def cmd_generate(args: argparse.Namespace) -> int:
    settings = get_settings()
    text = _read_input(args.input)
    flowchart = generate_flowchart(text, page_id=args.page_id, settings=settings)
    if args.output:
        save_document(Path(args.output), flowchart, prompt=text)
        logger.info("Saved project document", extra={"path": args.output})
    if args.summary:
        print(_summarize(flowchart))
    else:
        print(json.dumps(flowchart.to_dict(), indent=2, ensure_ascii=False))
    return 0


def cmd_bulk(args: argparse.Namespace) -> int:
    store = PageStore(get_settings())
    pages = store.import_bulk(_read_input(args.input))
    print(json.dumps([page.model_dump(mode="json") for page in pages], indent=2, ensure_ascii=False))
    return 0


def cmd_reconstruct(args: argparse.Namespace) -> int:
    document = read_document(Path(args.document))
    print(reconstruct_prompt(document.flowchart()))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    from .api import create_app

    app = create_app(get_settings())
    app.run(host=args.host, port=args.port, debug=args.debug)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stepflow", description="Turn step-by-step plans into flowcharts")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate a flowchart from plan text")
    generate.add_argument("input", nargs="?", default="-", help="Plan file, or '-' for stdin")
    generate.add_argument("--page-id", help="Prefix every id with this page id")
    generate.add_argument("--summary", action="store_true", help="Print a readable summary instead of JSON")
    generate.add_argument("--output", help="Also save a project document to this path")
    generate.set_defaults(func=cmd_generate)

    bulk = subparsers.add_parser("bulk", help="Create pages from a bulk page prompt")
    bulk.add_argument("input", nargs="?", default="-", help="Bulk prompt file, or '-' for stdin")
    bulk.set_defaults(func=cmd_bulk)

    reconstruct = subparsers.add_parser("reconstruct", help="Rebuild step text from a saved document")
    reconstruct.add_argument("document", help="Project document path")
    reconstruct.set_defaults(func=cmd_reconstruct)

    serve = subparsers.add_parser("serve", help="Run the HTTP API server")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=5001)
    serve.add_argument("--debug", action="store_true")
    serve.set_defaults(func=cmd_serve)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
        configure_logging(level=settings.log_level, json_logs=settings.json_logs)
        return args.func(args)
    except StepflowException as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

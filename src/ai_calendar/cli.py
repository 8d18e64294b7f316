from __future__ import annotations

import argparse
import logging
from typing import Dict, List, Optional

import orjson

from .bootstrap import configure_logging
from .config import get_settings


def _parse_context(pairs: Optional[List[str]]) -> Dict[str, str]:
    context: Dict[str, str] = {}
    for pair in pairs or []:
        key, separator, value = pair.partition("=")
        if not separator or not key:
            raise argparse.ArgumentTypeError(f"Context entries must look like key=value, got '{pair}'")
        context[key.strip()] = value.strip()
    return context


def build_parser() -> argparse.ArgumentParser:
    server = get_settings().server
    parser = argparse.ArgumentParser(description="AI Calendar command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    api_parser = subparsers.add_parser("api", help="Start the FastAPI server.")
    api_parser.add_argument("--host", default=server.host)
    api_parser.add_argument("--port", type=int, default=server.port)

    mcp_parser = subparsers.add_parser("mcp", help="Start the FastMCP server exposing the calendar tools.")
    mcp_parser.add_argument("--host", default=server.host)
    mcp_parser.add_argument("--port", type=int, default=server.mcp_port)

    ask_parser = subparsers.add_parser("ask", help="Run one natural language command and print the result.")
    ask_parser.add_argument("text", help="The command, e.g. \"Schedule lunch with Sam tomorrow at noon\".")
    ask_parser.add_argument("--context", action="append", metavar="KEY=VALUE", help="Extra context entry.")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    configure_logging()
    logging.getLogger(__name__).info("AI Calendar CLI starting")
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "api":
        from .services.http import run_local_server

        run_local_server(host=args.host, port=args.port)
    elif args.command == "mcp":
        from .services.mcp import run_mcp_server

        run_mcp_server(host=args.host, port=args.port)
    elif args.command == "ask":
        from .api.state import get_api_state

        try:
            context = _parse_context(args.context)
        except argparse.ArgumentTypeError as exc:
            parser.error(str(exc))
        result = get_api_state().orchestrator.process(args.text, context)
        print(orjson.dumps(result.to_dict(), option=orjson.OPT_INDENT_2, default=str).decode())
        return 0 if result.success else 1
    else:  # pragma: no cover - argparse enforces choices
        parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

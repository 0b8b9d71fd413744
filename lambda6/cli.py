#!/usr/bin/env python3
# =============================================================================
# CLI Tool for lambda6 Handlers
# =============================================================================
# Invoke a handler locally through the same dispatch path as Lambda.
#
# Usage:
#   lambda6 lambda6.handlers.greeting:GreetingHandler greet --payload '{"name": "Bond"}'
#   lambda6 lambda6.handlers.greeting:GreetingHandler --list
#   lambda6 myapp.handler:MyHandler --json '{"operation": "ping"}'
#   lambda6 myapp.handler:MyHandler --file event.json --pretty
# =============================================================================

import argparse
import asyncio
import importlib
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from lambda6.runtime.deps import create_deps
from lambda6.runtime.handler import Handler

logger = logging.getLogger(__name__)


def load_handler_class(spec: str) -> type:
    """Import a Handler subclass from a 'module:ClassName' string."""
    module_name, sep, class_name = spec.partition(":")
    if not sep or not module_name or not class_name:
        raise ValueError(f"handler must look like 'module:ClassName', got {spec!r}")
    cls = getattr(importlib.import_module(module_name), class_name)
    if not (isinstance(cls, type) and issubclass(cls, Handler)):
        raise TypeError(f"{spec} is not a Handler subclass")
    return cls


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lambda6",
        description="Invoke a lambda6 handler locally",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s lambda6.handlers.greeting:GreetingHandler --list
  %(prog)s lambda6.handlers.greeting:GreetingHandler greet --payload '{"name": "Bond"}'
  %(prog)s lambda6.handlers.greeting:GreetingHandler --json '{"operation": "test"}'
  %(prog)s lambda6.handlers.greeting:GreetingHandler --file event.json
        """
    )
    parser.add_argument("handler", help="Handler class as module:ClassName")
    parser.add_argument("operation", nargs="?", help="Operation to invoke")
    parser.add_argument("--payload", help="JSON payload for the operation")
    parser.add_argument("--json", "-j", help="Full JSON event (overrides operation)")
    parser.add_argument("--file", "-f", help="JSON file to load the event from")
    parser.add_argument("--list", "-l", action="store_true", help="List registered operations")
    parser.add_argument("--deep-copy", action="store_true", help="Deep-freeze invocation contexts")
    parser.add_argument("--pretty", "-p", action="store_true", help="Pretty print output")
    parser.add_argument("--region", "-r", help="AWS region")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable INFO logging")
    return parser


def build_event(args: argparse.Namespace, handler: Handler) -> Optional[Dict[str, Any]]:
    """Build the event from --file, --json or operation/--payload."""
    if args.file:
        with open(args.file, "r") as f:
            return json.load(f)
    if args.json:
        return json.loads(args.json)
    if args.operation:
        event: Dict[str, Any] = {handler.options.operation_key: args.operation}
        if args.payload:
            event[handler.options.payload_key] = json.loads(args.payload)
        return event
    return None


def _dump(value: Any, pretty: bool) -> str:
    if pretty:
        return json.dumps(value, indent=2, ensure_ascii=False, default=str)
    return json.dumps(value, ensure_ascii=False, default=str)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO)

    try:
        handler_cls = load_handler_class(args.handler)
        overrides = {"deep_copy": True} if args.deep_copy else {}
        handler = handler_cls(deps=create_deps(region=args.region), **overrides)

        if args.list:
            operations = {name: dict(meta) for name, meta in handler_cls.operations().items()}
            print(_dump(operations, args.pretty))
            return 0

        event = build_event(args, handler)
        if event is None:
            parser.print_help()
            return 1

        result = asyncio.run(handler.handle(event))
    except Exception as e:
        print(_dump({"error": str(e), "type": type(e).__name__}, args.pretty), file=sys.stderr)
        return 1

    print(_dump(result, args.pretty))
    return 0


if __name__ == "__main__":
    sys.exit(main())

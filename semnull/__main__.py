#!/usr/bin/env python3

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config.logging import configure_logging
from .config.wrapper_source import WrapperSource, WrapperSourceError, resolve_wrapper_source
from .passes.bins import OPTIONS_ATTRIBUTE_NAME, STRICT_FLAG_NAME
from .passes.context import MacroKind
from .syntax.exprs import Verbatim
from .syntax.items import Attribute, ImplBlock, Method
from .syntax.parse import TypeSyntaxError, parse_type
from .syntax.render import format_method, format_type
from .syntax.types import PathType
from .transformer import transform_impl

PLACEHOLDER_BODY = "{ todo!() }"


def build_block(type_text: str, strict: bool, subscription: bool) -> tuple[ImplBlock, Method]:
    attrs = []
    if strict:
        attrs.append(Attribute(path=(OPTIONS_ATTRIBUTE_NAME,), style="list", tokens=STRICT_FLAG_NAME))
    method = Method(
        name="field",
        output=parse_type(type_text),
        body=Verbatim(PLACEHOLDER_BODY),
        attrs=attrs,
        params=["&self"],
        is_async=True,
    )
    kind = MacroKind.SUBSCRIPTION if subscription else MacroKind.OBJECT
    block = ImplBlock(
        self_ty=PathType.from_names("Query"),
        attrs=[Attribute(path=(kind.value,))],
        items=[method],
    )
    return block, method


def run_wrap(args: argparse.Namespace) -> int:
    try:
        wrapper_source = WrapperSource.parse(args.source) if args.source else None
        block, method = build_block(args.type, args.strict, args.subscription)
    except (TypeSyntaxError, WrapperSourceError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    result = transform_impl(block, wrapper_source=wrapper_source)
    for diagnostic in result.diagnostics:
        print(f"error: {diagnostic}", file=sys.stderr)
    if not result.ok:
        return 1
    assert method.output is not None, "wrap command always declares a result type"
    if method.name not in result.wrapped_methods:
        print(f"note: `{args.type}` is not a recognized field type; left unchanged", file=sys.stderr)
    if args.show_shim:
        print(format_method(method))
    else:
        print(format_type(method.output))
    return 0


def run_source(args: argparse.Namespace) -> int:
    manifest = Path(args.manifest) if args.manifest else None
    try:
        print(resolve_wrapper_source(manifest))
    except WrapperSourceError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="semnull")
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("--log-json", action="store_true", help="log JSON lines to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    wrap = subparsers.add_parser("wrap", help="print the rewritten result type of a field")
    wrap.add_argument("type", help="result type, e.g. 'Vec<Option<Foo>>'")
    wrap.add_argument("--strict", action="store_true", help="use strict non-null markers")
    wrap.add_argument("--subscription", action="store_true", help="treat the block as a subscription")
    wrap.add_argument("--source", help="wrapper source path, e.g. '::my_wrappers' (default: resolve from Cargo.toml)")
    wrap.add_argument("--show-shim", action="store_true", help="print the whole rewritten method")
    wrap.set_defaults(handler=run_wrap)

    source = subparsers.add_parser("source", help="print the resolved wrapper source path")
    source.add_argument("--manifest", help="Cargo.toml to read (default: discover)")
    source.set_defaults(handler=run_source)

    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, log_json=args.log_json)
    return args.handler(args)


if __name__ == "__main__":
    raise SystemExit(main())

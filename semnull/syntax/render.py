"""
Source writer for the syntax model.

`format_type` is the inverse of `parse_type` up to whitespace; `format_expr`
and `format_impl_block` emit the rewritten method bodies and blocks.
"""

from __future__ import annotations

from .exprs import Block, Expr, Let, Reinterpret, StreamMap, Var, Verbatim
from .items import Attribute, ImplBlock, Method, OtherItem
from .types import (
    AngleBracketed,
    ArrayType,
    AssocType,
    ImplTraitType,
    LifetimeBound,
    OpaqueArg,
    OtherType,
    ParenType,
    PathType,
    ReferenceType,
    SliceType,
    TraitBound,
    Type,
    TypeArg,
)

INDENT = "    "

# Default conversion emitted when a Reinterpret / StreamMap node names no function.
DEFAULT_REINTERPRET = PathType.from_names("std", "mem", "transmute", leading_colon=True)
DEFAULT_STREAM_MAP = PathType.from_names("tokio_stream", "StreamExt", "map", leading_colon=True)
REINTERPRET_LINT_ALLOW = "#[allow(clippy::useless_transmute)]"


def format_generic_args(args: AngleBracketed) -> str:
    parts = []
    for arg in args.args:
        if isinstance(arg, TypeArg):
            parts.append(format_type(arg.ty))
        elif isinstance(arg, AssocType):
            parts.append(f"{arg.ident} = {format_type(arg.ty)}")
        elif isinstance(arg, OpaqueArg):
            parts.append(arg.text)
        else:
            raise AssertionError(f"unknown generic argument node: {arg!r}")
    return f"<{', '.join(parts)}>"


def format_path(path: PathType) -> str:
    segments = []
    for segment in path.segments:
        text = segment.ident
        if segment.arguments is not None:
            text += format_generic_args(segment.arguments)
        segments.append(text)
    return ("::" if path.leading_colon else "") + "::".join(segments)


def format_type(ty: Type) -> str:
    if isinstance(ty, PathType):
        return format_path(ty)
    if isinstance(ty, ArrayType):
        return f"[{format_type(ty.elem)}; {ty.length}]"
    if isinstance(ty, SliceType):
        return f"[{format_type(ty.elem)}]"
    if isinstance(ty, ReferenceType):
        lifetime = f"{ty.lifetime} " if ty.lifetime is not None else ""
        mutable = "mut " if ty.mutable else ""
        return f"&{lifetime}{mutable}{format_type(ty.elem)}"
    if isinstance(ty, ParenType):
        return f"({format_type(ty.elem)})"
    if isinstance(ty, ImplTraitType):
        bounds = []
        for bound in ty.bounds:
            if isinstance(bound, TraitBound):
                bounds.append(format_path(bound.path))
            elif isinstance(bound, LifetimeBound):
                bounds.append(bound.lifetime)
        return "impl " + " + ".join(bounds)
    if isinstance(ty, OtherType):
        return ty.text
    raise AssertionError(f"unknown type node: {ty!r}")


def _indent(text: str, depth: int) -> str:
    return "\n".join((INDENT * depth + line) if line else line for line in text.splitlines())


def format_expr(expr: Expr) -> str:
    if isinstance(expr, Verbatim):
        return expr.source
    if isinstance(expr, Var):
        return expr.name
    if isinstance(expr, Let):
        annotation = f": {format_type(expr.ty)}" if expr.ty is not None else ""
        return f"let {expr.name}{annotation} = {format_expr(expr.value)};"
    if isinstance(expr, Reinterpret):
        function = format_path(expr.function if expr.function is not None else DEFAULT_REINTERPRET)
        source = format_type(expr.source) if expr.source is not None else "_"
        call = f"{function}::<{source}, {format_type(expr.target)}>({format_expr(expr.value)})"
        return f"unsafe {{ {call} }}"
    if isinstance(expr, StreamMap):
        function = format_path(expr.function if expr.function is not None else DEFAULT_STREAM_MAP)
        body = format_expr(expr.body)
        return f"{function}({format_expr(expr.stream)}, |{expr.param}| {body})"
    if isinstance(expr, Block):
        lines = [format_expr(stmt) for stmt in expr.stmts]
        if expr.tail is not None:
            if isinstance(expr.tail, (Reinterpret, StreamMap)):
                lines.append(REINTERPRET_LINT_ALLOW)
            lines.append(format_expr(expr.tail))
        inner = "\n".join(_indent(line, 1) for line in lines)
        return "{\n" + inner + "\n}"
    raise AssertionError(f"unknown expression node: {expr!r}")


def format_attribute(attr: Attribute) -> str:
    path = "::".join(attr.path)
    if attr.style == "path":
        return f"#[{path}]"
    if attr.style == "list":
        return f"#[{path}({attr.tokens})]"
    return f"#[{path} = {attr.tokens}]"


def format_method(method: Method) -> str:
    lines = [format_attribute(attr) for attr in method.attrs]
    prefix = "async fn" if method.is_async else "fn"
    output = f" -> {format_type(method.output)}" if method.output is not None else ""
    signature = f"{prefix} {method.name}({', '.join(method.params)}){output}"
    body = format_expr(method.body)
    if not body.startswith("{"):
        body = "{ " + body + " }"
    lines.append(f"{signature} {body}")
    return "\n".join(lines)


def format_impl_block(block: ImplBlock) -> str:
    lines = [format_attribute(attr) for attr in block.attrs]
    lines.append(f"impl {format_type(block.self_ty)} {{")
    for item in block.items:
        if isinstance(item, Method):
            lines.append(_indent(format_method(item), 1))
        elif isinstance(item, OtherItem):
            lines.append(_indent(item.text, 1))
    lines.append("}")
    return "\n".join(lines)

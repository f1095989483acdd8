"""
Type-expression reader backed by the tree-sitter Rust grammar.

`parse_type` embeds the text in a `type` item, parses it, and maps the
grammar's type nodes onto `semnull.syntax.types`. Shapes outside the model
(tuples, function pointers, raw pointers, `dyn` objects, qualified paths,
`!`, ...) become `OtherType`; generic arguments that are not types become
`OpaqueArg`. Spans are 1-based line/column pairs relative to the parsed
text, shifted by `origin`.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cache

import tree_sitter_rust
from tree_sitter import Language, Node, Parser, Tree

from ..errors import SemnullError
from .types import (
    AngleBracketed,
    ArrayType,
    AssocType,
    GenericArg,
    ImplTraitType,
    LifetimeBound,
    OpaqueArg,
    OtherType,
    ParenType,
    PathSegment,
    PathType,
    ReferenceType,
    SliceType,
    Span,
    TraitBound,
    Type,
    TypeArg,
)

# The parsed text always starts on the second line of the embedding source.
TYPE_PREFIX = "type __SemnullType =\n"
TYPE_SUFFIX = "\n;"
ATTRIBUTE_PREFIX = "#[__semnull(\n"
ATTRIBUTE_SUFFIX = "\n)]"

# Leaf nodes that name a single path segment.
SEGMENT_NODE_TYPES = frozenset(
    ("identifier", "type_identifier", "primitive_type", "crate", "self", "super", "metavariable")
)
SCOPED_NODE_TYPES = frozenset(("scoped_identifier", "scoped_type_identifier"))
COMMENT_NODE_TYPES = frozenset(("line_comment", "block_comment"))


class TypeSyntaxError(SemnullError):
    def __init__(self, message: str, span: Span | None = None):
        self.message = message
        self.span = span
        super().__init__(message if span is None else f"{span}: {message}")


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    span: Span


@cache
def rust_language() -> Language:
    return Language(tree_sitter_rust.language())


def parse_bytes(data: bytes) -> Tree:
    parser = Parser()
    parser.language = rust_language()
    return parser.parse(data)


def _first_error(node: Node) -> Node | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


class _Reader:
    """Maps nodes of one embedding parse back onto the caller's text."""

    def __init__(self, text: str, prefix: str, suffix: str, origin: Span):
        self.text = text
        self.origin = origin
        self.data = (prefix + text + suffix).encode("utf-8")
        self.tree = parse_bytes(self.data)

    def span(self, node: Node) -> Span:
        # Row 0 is the prefix line; the text starts at row 1.
        row, column = node.start_point[0], node.start_point[1]
        if row <= 1:
            return Span(self.origin.line, column + self.origin.column)
        return Span(self.origin.line + row - 1, column + 1)

    def source(self, node: Node) -> str:
        return self.data[node.start_byte : node.end_byte].decode("utf-8")

    def item(self, expected: str) -> Node:
        root = self.tree.root_node
        if root.has_error:
            bad = _first_error(root)
            where = self.span(bad) if bad is not None else None
            raise TypeSyntaxError(f"invalid syntax in `{self.text.strip()}`", where)
        items = [child for child in root.named_children if child.type not in COMMENT_NODE_TYPES]
        if len(items) != 1 or items[0].type != expected:
            raise TypeSyntaxError(f"`{self.text.strip()}` is not a single type expression")
        return items[0]

    # Type nodes.

    def path(self, node: Node) -> PathType | None:
        """Read a (possibly generic, possibly scoped) path, or None for other shapes."""
        if node.type in SEGMENT_NODE_TYPES:
            return PathType(
                segments=[PathSegment(ident=self.source(node), span=self.span(node))],
                span=self.span(node),
            )
        if node.type in SCOPED_NODE_TYPES:
            name = node.child_by_field_name("name")
            prefix = node.child_by_field_name("path")
            if name is None:
                return None
            if prefix is None:
                path = PathType(leading_colon=True)
            else:
                path = self.path(prefix)
                if path is None:
                    return None
            path.segments.append(PathSegment(ident=self.source(name), span=self.span(name)))
            path.span = self.span(node)
            return path
        if node.type == "generic_type":
            base = node.child_by_field_name("type")
            arguments = node.child_by_field_name("type_arguments")
            path = self.path(base) if base is not None else None
            if path is None or arguments is None or path.last is None:
                return None
            path.last.arguments = self.generic_args(arguments)
            path.span = self.span(node)
            return path
        return None

    def generic_args(self, node: Node) -> AngleBracketed:
        args: list[GenericArg] = []
        for child in node.named_children:
            if child.type in COMMENT_NODE_TYPES:
                continue
            if child.type == "type_binding":
                name = child.child_by_field_name("name")
                bound = child.child_by_field_name("type")
                if name is None or bound is None:
                    args.append(OpaqueArg(text=self.source(child)))
                else:
                    args.append(AssocType(ident=self.source(name), ty=self.type(bound)))
            elif child.type == "lifetime" or child.type == "block" or child.type.endswith("_literal"):
                args.append(OpaqueArg(text=self.source(child)))
            else:
                args.append(TypeArg(ty=self.type(child)))
        return AngleBracketed(args=args)

    def bounds(self, node: Node) -> list[TraitBound | LifetimeBound] | None:
        if node.type == "bounded_type":
            out: list[TraitBound | LifetimeBound] = []
            for child in node.named_children:
                part = self.bounds(child)
                if part is None:
                    return None
                out.extend(part)
            return out
        if node.type == "abstract_type":
            trait = node.child_by_field_name("trait")
            return self.bounds(trait) if trait is not None else None
        if node.type == "lifetime":
            return [LifetimeBound(lifetime=self.source(node))]
        path = self.path(node)
        if path is None:
            return None
        return [TraitBound(path=path)]

    def impl_trait(self, node: Node) -> Type:
        # `impl A + B` may come back as a bounded type whose leftmost operand is the impl.
        leftmost = node
        while leftmost.type == "bounded_type" and leftmost.named_child_count > 0:
            leftmost = leftmost.named_children[0]
        bounds = self.bounds(node) if leftmost.type == "abstract_type" else None
        if bounds is None:
            return OtherType(text=self.source(node), span=self.span(node))
        return ImplTraitType(bounds=bounds, span=self.span(node))

    def type(self, node: Node) -> Type:
        span = self.span(node)
        path = self.path(node)
        if path is not None:
            return path
        if node.type == "reference_type":
            elem = node.child_by_field_name("type")
            if elem is not None:
                lifetime = next((c for c in node.named_children if c.type == "lifetime"), None)
                return ReferenceType(
                    elem=self.type(elem),
                    lifetime=self.source(lifetime) if lifetime is not None else None,
                    mutable=any(c.type == "mutable_specifier" for c in node.children),
                    span=span,
                )
        if node.type == "array_type":
            elem = node.child_by_field_name("element")
            length = node.child_by_field_name("length")
            if elem is not None and length is None:
                return SliceType(elem=self.type(elem), span=span)
            if elem is not None:
                return ArrayType(elem=self.type(elem), length=self.source(length), span=span)
        if node.type == "tuple_type":
            # One element without a trailing comma is a parenthesized type.
            elems = [c for c in node.named_children if c.type not in COMMENT_NODE_TYPES]
            if len(elems) == 1 and not any(c.type == "," for c in node.children):
                return ParenType(elem=self.type(elems[0]), span=span)
        if node.type in ("abstract_type", "bounded_type"):
            return self.impl_trait(node)
        return OtherType(text=self.source(node), span=span)


def parse_type(text: str, origin: Span = Span(1, 1)) -> Type:
    reader = _Reader(text, TYPE_PREFIX, TYPE_SUFFIX, origin)
    item = reader.item("type_item")
    node = item.child_by_field_name("type")
    if node is None:
        raise TypeSyntaxError(f"expected a type in `{text.strip()}`")
    return reader.type(node)


def parse_attribute_tokens(text: str, origin: Span = Span(1, 1)) -> list[Token]:
    """Split attribute arguments into top-level tokens.

    Nested delimiter groups come back as a single `token_tree` token.
    """
    reader = _Reader(text, ATTRIBUTE_PREFIX, ATTRIBUTE_SUFFIX, origin)
    item = reader.item("attribute_item")
    attribute = next((c for c in item.named_children if c.type == "attribute"), None)
    arguments = attribute.child_by_field_name("arguments") if attribute is not None else None
    if arguments is None:
        raise TypeSyntaxError(f"expected attribute arguments in `{text.strip()}`")
    # Drop the enclosing parentheses.
    inner = arguments.children[1:-1]
    return [
        Token(kind=child.type, text=reader.source(child), span=reader.span(child))
        for child in inner
        if child.type not in COMMENT_NODE_TYPES
    ]

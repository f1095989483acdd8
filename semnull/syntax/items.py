"""
Impl block model handed over by the front end.

Only the parts the transform reads or rewrites are structured: attributes,
method result types and method bodies. Parameters and non-method items are
carried as text and emitted unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from .exprs import Expr
from .types import Span, Type

AttributeStyle = Literal["path", "list", "name_value"]


@dataclass
class Attribute:
    # `#[a::b]`, `#[a::b(tokens)]` or `#[a::b = tokens]`.
    path: tuple[str, ...]
    style: AttributeStyle = "path"
    tokens: str = ""
    span: Span | None = None

    @property
    def name(self) -> str:
        assert len(self.path) > 0, "attribute path must not be empty"
        return self.path[-1]

    def is_ident(self, ident: str) -> bool:
        return len(self.path) == 1 and self.path[0] == ident


@dataclass
class Method:
    name: str
    output: Type | None
    body: Expr
    attrs: list[Attribute] = field(default_factory=list)
    params: list[str] = field(default_factory=list)
    is_async: bool = False
    span: Span | None = None


@dataclass
class OtherItem:
    text: str
    span: Span | None = None


ImplItem = Method | OtherItem


@dataclass
class ImplBlock:
    self_ty: Type
    attrs: list[Attribute] = field(default_factory=list)
    items: list[ImplItem] = field(default_factory=list)
    span: Span | None = None

    def methods(self) -> list[Method]:
        return [item for item in self.items if isinstance(item, Method)]

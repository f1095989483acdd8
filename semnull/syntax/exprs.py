"""
Body skeleton model.

Method bodies arrive from the front end as `Verbatim` source. The body pass
replaces them with a small shim built from the remaining node kinds:

  Block(stmts=[Let("result", T, Verbatim(...))], tail=Reinterpret(Var("result"), None, U))
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .types import PathType, Type


@dataclass
class Verbatim:
    source: str


@dataclass
class Var:
    name: str


@dataclass
class Let:
    name: str
    ty: Type | None
    value: Expr


@dataclass
class Reinterpret:
    # Same-layout conversion `source -> target`; `source=None` leaves it inferred.
    value: Expr
    source: Type | None
    target: Type
    function: PathType | None = None


@dataclass
class StreamMap:
    # Lazy element-wise map over a stream value.
    stream: Expr
    param: str
    body: Expr
    function: PathType | None = None


@dataclass
class Block:
    stmts: list[Let] = field(default_factory=list)
    tail: Expr | None = None


Expr = Verbatim | Var | Let | Reinterpret | StreamMap | Block

"""Syntax model for impl blocks, method result types and method bodies."""

from .exprs import Block, Expr, Let, Reinterpret, StreamMap, Var, Verbatim
from .items import Attribute, ImplBlock, ImplItem, Method, OtherItem
from .parse import TypeSyntaxError, parse_type
from .render import format_expr, format_impl_block, format_type
from .types import (
    AngleBracketed,
    ArrayType,
    AssocType,
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

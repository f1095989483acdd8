"""
Pass: wrap_field_type

Inserts marker wrappers into a field type, then writes the result back into
the method signature.

Transform shape:
before:
  fn items(&self) -> Vec<Option<Foo>>
after:
  fn items(&self) -> SemanticNonNull<Vec<SemanticNonNull<Option<Foo>>>>

strict (`#[semantic_nullability(strict_non_null)]`):
  fn item(&self) -> Option<Foo>
  fn item(&self) -> StrictNonNull<Option<StrictNonNull<Foo>>>
"""

from __future__ import annotations

from copy import deepcopy

from ..diagnostics import DiagnosticError
from ..syntax.types import (
    ArrayType,
    ParenType,
    PathSegment,
    PathType,
    ReferenceType,
    SliceType,
    Type,
    TypeArg,
)
from .bins import container_types
from .context import PassContext
from .decider import decide
from .extract_field_type import FieldSlot


PASS_NAME = "wrap_field_type"


def _require_type_arg(segment: PathSegment, path: PathType) -> TypeArg:
    # Recognized containers must be written as `Name<T, ...>`.
    span = segment.span if segment.span is not None else path.span
    if segment.arguments is None:
        raise DiagnosticError.at(f"`{segment.ident}` should have angle bracketed generic arguments", span)
    args = segment.arguments.args
    if len(args) == 0 or not isinstance(args[0], TypeArg):
        raise DiagnosticError.at(f"`{segment.ident}` should have one type argument", span)
    return args[0]


def wrap_type(ty: Type, is_strict: bool, needs_wrap: bool, ctx: PassContext) -> Type:
    decision = decide(ty, is_strict, needs_wrap)
    new_ty: Type
    if isinstance(ty, ArrayType):
        new_ty = ArrayType(
            elem=wrap_type(ty.elem, is_strict, decision.wrap_inner, ctx),
            length=ty.length,
            span=ty.span,
        )
    elif isinstance(ty, SliceType):
        new_ty = SliceType(elem=wrap_type(ty.elem, is_strict, decision.wrap_inner, ctx), span=ty.span)
    elif isinstance(ty, ParenType):
        new_ty = ParenType(elem=wrap_type(ty.elem, is_strict, decision.wrap_inner, ctx), span=ty.span)
    elif isinstance(ty, ReferenceType):
        new_ty = ReferenceType(
            elem=wrap_type(ty.elem, is_strict, decision.wrap_inner, ctx),
            lifetime=ty.lifetime,
            mutable=ty.mutable,
            span=ty.span,
        )
    elif isinstance(ty, PathType):
        segment = ty.last
        if segment is None:
            raise DiagnosticError.at("Path should have at least one segment", ty.span)
        new_ty = deepcopy(ty)
        if segment.ident in container_types:
            inner = _require_type_arg(segment, ty)
            # Only the first argument is visited; `Result` error types stay as written.
            new_ty.segments[-1].arguments.args[0] = TypeArg(
                ty=wrap_type(inner.ty, is_strict, decision.wrap_inner, ctx)
            )
    else:
        # Impl-trait and opaque nodes are carried as-is.
        new_ty = deepcopy(ty)

    if decision.wrap_this:
        return ctx.wrap(new_ty, is_strict)
    return new_ty


def apply(slot: FieldSlot, is_strict: bool, ctx: PassContext) -> tuple[Type, Type]:
    # The outermost field type is always wrapped.
    new_field_type = wrap_type(slot.ty, is_strict, True, ctx)
    orig_field_type = slot.ty
    slot.replace(new_field_type)
    return orig_field_type, deepcopy(new_field_type)

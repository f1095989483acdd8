"""
Pass: extract_field_type

Locates the field type inside a method result type.

Transform shape:
before:
  fn a(&self) -> ((Vec<Foo>))                      # field type: Vec<Foo>
  fn b(&self) -> impl Stream<Item = i32> + Send    # field type: i32 (subscriptions only)
  fn c(&self) -> impl Fn()                         # no field type
after:
  (nothing changes; the returned slot is used by wrap_field_type)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from ..syntax.types import (
    ArrayType,
    AssocType,
    ImplTraitType,
    ParenType,
    PathType,
    ReferenceType,
    SliceType,
    TraitBound,
    Type,
)
from .bins import STREAM_ITEM_NAME, STREAM_TRAIT_NAME
from .context import PassContext


PASS_NAME = "extract_field_type"


@dataclass
class FieldSlot:
    ty: Type
    # True when `ty` is the item type of a returned stream.
    streaming: bool
    # Writes a replacement type back into the position `ty` was found at.
    replace: Callable[[Type], None]


def _stream_item_slot(ty: ImplTraitType) -> FieldSlot | None:
    for bound in ty.bounds:
        if not isinstance(bound, TraitBound):
            continue
        segment = bound.path.last
        if segment is None or segment.ident != STREAM_TRAIT_NAME or segment.arguments is None:
            continue
        for arg in segment.arguments.args:
            if isinstance(arg, AssocType) and arg.ident == STREAM_ITEM_NAME:
                return FieldSlot(ty=arg.ty, streaming=True, replace=lambda new, arg=arg: setattr(arg, "ty", new))
    return None


def apply(ty: Type, replace: Callable[[Type], None], ctx: PassContext) -> FieldSlot | None:
    # Parentheses are transparent.
    if isinstance(ty, ParenType):
        return apply(ty.elem, lambda new, paren=ty: setattr(paren, "elem", new), ctx)
    if isinstance(ty, (PathType, ArrayType, SliceType, ReferenceType)):
        return FieldSlot(ty=ty, streaming=False, replace=replace)
    # Stream item extraction is only meaningful for subscription blocks.
    if isinstance(ty, ImplTraitType) and ctx.is_subscription:
        return _stream_item_slot(ty)
    return None

"""
Wrapping decider.

Source of truth for, at any node of a field type:
- whether the node itself gets a marker wrapper,
- whether the node's single child gets a marker wrapper when it is visited.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..syntax.types import ArrayType, PathType, SliceType, Type
from .bins import LIST_LOGIC_BIN, NULLABLE_LOGIC_BIN, container_bin_by_root


@dataclass(frozen=True)
class WrapDecision:
    wrap_this: bool
    wrap_inner: bool


def container_root_name(ty: Type) -> str | None:
    if not isinstance(ty, PathType):
        return None
    segment = ty.last
    if segment is None:
        return None
    return segment.ident if segment.ident in container_bin_by_root else None


def decide_container(root_name: str, is_strict: bool, needs_wrap: bool) -> WrapDecision:
    bin_name = container_bin_by_root.get(root_name)
    assert bin_name is not None, f"unknown container root: {root_name}"
    if bin_name == LIST_LOGIC_BIN:
        # List and element nullability are independent in the schema.
        return WrapDecision(wrap_this=needs_wrap, wrap_inner=True)
    assert bin_name == NULLABLE_LOGIC_BIN, f"unexpected container bin: {bin_name}"
    # Strict mode asserts both the container and its argument.
    return WrapDecision(wrap_this=needs_wrap, wrap_inner=is_strict)


def decide(ty: Type, is_strict: bool, needs_wrap: bool) -> WrapDecision:
    root_name = container_root_name(ty)
    if root_name is not None:
        return decide_container(root_name, is_strict, needs_wrap)
    if isinstance(ty, (ArrayType, SliceType)):
        return WrapDecision(wrap_this=needs_wrap, wrap_inner=True)
    # Parentheses and references are transparent; leaves have no child.
    return WrapDecision(wrap_this=needs_wrap, wrap_inner=False)

"""Shared pytest fixtures for semnull tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator

import pytest
import structlog

from semnull.config.wrapper_source import WrapperSource
from semnull.passes.context import MacroKind, PassContext
from semnull.passes.wrap_field_type import wrap_type
from semnull.syntax.exprs import Verbatim
from semnull.syntax.items import Attribute, ImplBlock, Method
from semnull.syntax.parse import parse_type
from semnull.syntax.render import format_type
from semnull.syntax.types import (
    ArrayType,
    AssocType,
    ImplTraitType,
    ParenType,
    PathType,
    ReferenceType,
    SliceType,
    TraitBound,
    Type,
    TypeArg,
)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None, None, None]:
    """Restore logger state after tests that configure logging."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    semnull_logger = logging.getLogger("semnull")
    semnull_level = semnull_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    semnull_logger.setLevel(semnull_level)
    structlog.reset_defaults()


@pytest.fixture
def wrapper_source() -> WrapperSource:
    """Short wrapper source so expected types stay readable: `sn::SemanticNonNull<T>`."""
    return WrapperSource(segments=("sn",), leading_colon=False)


@pytest.fixture
def object_ctx(wrapper_source: WrapperSource) -> PassContext:
    return PassContext.build(MacroKind.OBJECT, wrapper_source)


@pytest.fixture
def subscription_ctx(wrapper_source: WrapperSource) -> PassContext:
    return PassContext.build(MacroKind.SUBSCRIPTION, wrapper_source)


@pytest.fixture
def wrap_text(wrapper_source: WrapperSource) -> Callable[..., str]:
    """Wrap a field type given as text and render the result."""

    def _wrap(text: str, strict: bool = False, kind: MacroKind = MacroKind.OBJECT) -> str:
        ctx = PassContext.build(kind, wrapper_source)
        return format_type(wrap_type(parse_type(text), strict, True, ctx))

    return _wrap


@pytest.fixture
def make_method() -> Callable[..., Method]:
    def _make(
        name: str,
        output: str | None,
        body: str = "{ todo!() }",
        attrs: list[Attribute] | None = None,
    ) -> Method:
        return Method(
            name=name,
            output=parse_type(output) if output is not None else None,
            body=Verbatim(body),
            attrs=attrs or [],
            params=["&self"],
            is_async=True,
        )

    return _make


@pytest.fixture
def make_block() -> Callable[..., ImplBlock]:
    def _make(items: list, attrs: list[Attribute] | None = None) -> ImplBlock:
        if attrs is None:
            attrs = [Attribute(path=("Object",))]
        return ImplBlock(self_ty=PathType.from_names("Query"), attrs=attrs, items=items)

    return _make


def _leaf_names(ty: Type) -> list[str]:
    out: list[str] = []
    if isinstance(ty, PathType):
        for segment in ty.segments:
            out.append(segment.ident)
            if segment.arguments is None:
                continue
            for arg in segment.arguments.args:
                if isinstance(arg, (TypeArg, AssocType)):
                    out.extend(_leaf_names(arg.ty))
    elif isinstance(ty, (ArrayType, SliceType, ReferenceType, ParenType)):
        out.extend(_leaf_names(ty.elem))
    elif isinstance(ty, ImplTraitType):
        for bound in ty.bounds:
            if isinstance(bound, TraitBound):
                out.extend(_leaf_names(bound.path))
    return out


@pytest.fixture
def leaf_names() -> Callable[[Type], list[str]]:
    """Every reachable path identifier in source order."""
    return _leaf_names

"""Tests for the per-method `semantic_nullability` attribute."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from semnull.diagnostics import DiagnosticError
from semnull.metadata.attribute_meta import AttributeMeta
from semnull.syntax.items import Attribute, Method
from semnull.syntax.types import Span


def _options(tokens: str, style: str = "list") -> Attribute:
    return Attribute(path=("semantic_nullability",), style=style, tokens=tokens, span=Span(3, 5))


class TestFromAttribute:
    @pytest.mark.parametrize(
        ("attr", "expected"),
        [
            (_options("", style="path"), False),
            (_options(""), False),
            (_options("strict_non_null"), True),
            (_options("strict_non_null = true"), True),
            (_options("strict_non_null = false"), False),
            (_options("strict_non_null,"), True),
        ],
    )
    def test_accepted_forms(self, attr: Attribute, expected: bool) -> None:
        assert AttributeMeta.from_attribute(attr).strict_non_null is expected

    @pytest.mark.parametrize(
        "attr",
        [
            _options("nullable"),
            _options("strict_non_null = 1"),
            _options("strict_non_null = "),
            _options("strict_non_null, strict_non_null"),
            _options("strict_non_null strict_non_null"),
            _options('"strict_non_null"'),
            _options("strict_non_null = yes"),
            _options('"x"', style="name_value"),
        ],
    )
    def test_rejected_forms(self, attr: Attribute) -> None:
        with pytest.raises(DiagnosticError) as info:
            AttributeMeta.from_attribute(attr)
        [diagnostic] = info.value.diagnostics
        assert diagnostic.message == "Invalid attribute values for `semantic_nullability`"
        assert diagnostic.span == Span(3, 5)


class TestTake:
    def test_removes_attribute(self, make_method: Callable[..., Method]) -> None:
        keep = Attribute(path=("graphql",), style="list", tokens='name = "x"')
        method = make_method("f", "Foo", attrs=[keep, _options("strict_non_null")])
        meta = AttributeMeta.take(method)
        assert meta.strict_non_null is True
        assert method.attrs == [keep]

    def test_absent_attribute_gives_defaults(self, make_method: Callable[..., Method]) -> None:
        method = make_method("f", "Foo")
        assert AttributeMeta.take(method) == AttributeMeta()

    def test_invalid_attribute_is_still_removed(self, make_method: Callable[..., Method]) -> None:
        method = make_method("f", "Foo", attrs=[_options("bogus")])
        with pytest.raises(DiagnosticError):
            AttributeMeta.take(method)
        assert method.attrs == []

    def test_qualified_path_is_not_the_option(self, make_method: Callable[..., Method]) -> None:
        other = Attribute(path=("other", "semantic_nullability"))
        method = make_method("f", "Foo", attrs=[other])
        assert AttributeMeta.take(method) == AttributeMeta()
        assert method.attrs == [other]

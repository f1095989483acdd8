"""Tests for the type-expression reader and writer."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from semnull.syntax.parse import TypeSyntaxError, parse_attribute_tokens, parse_type
from semnull.syntax.render import format_type
from semnull.syntax.types import (
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
    Span,
    TraitBound,
    Type,
    TypeArg,
)


class TestParseShapes:
    def test_bare_path(self) -> None:
        ty = parse_type("Foo")
        assert isinstance(ty, PathType)
        assert [s.ident for s in ty.segments] == ["Foo"]
        assert ty.segments[0].arguments is None

    def test_qualified_path_with_generic(self) -> None:
        ty = parse_type("::std::vec::Vec<u8>")
        assert isinstance(ty, PathType)
        assert ty.leading_colon is True
        assert [s.ident for s in ty.segments] == ["std", "vec", "Vec"]
        args = ty.segments[-1].arguments
        assert args is not None
        assert isinstance(args.args[0], TypeArg)

    def test_nested_generics_close_together(self) -> None:
        ty = parse_type("Vec<Option<Foo>>")
        assert format_type(ty) == "Vec<Option<Foo>>"

    def test_reference_with_lifetime_and_mut(self) -> None:
        ty = parse_type("&'a mut Foo")
        assert isinstance(ty, ReferenceType)
        assert ty.lifetime == "'a"
        assert ty.mutable is True
        assert isinstance(ty.elem, PathType)

    def test_array_and_slice(self) -> None:
        array = parse_type("[u8; N * 2]")
        assert isinstance(array, ArrayType)
        assert array.length == "N * 2"
        assert isinstance(parse_type("[u8]"), SliceType)

    def test_paren(self) -> None:
        ty = parse_type("(Foo)")
        assert isinstance(ty, ParenType)

    def test_tuple_and_unit_are_opaque(self) -> None:
        tuple_ty = parse_type("(i32, String)")
        assert isinstance(tuple_ty, OtherType)
        assert tuple_ty.text == "(i32, String)"
        unit = parse_type("()")
        assert isinstance(unit, OtherType)
        assert unit.text == "()"

    def test_impl_trait_with_item_binding(self) -> None:
        ty = parse_type("impl Stream<Item = Vec<i32>> + Send + 'static")
        assert isinstance(ty, ImplTraitType)
        assert isinstance(ty.bounds[0], TraitBound)
        assert isinstance(ty.bounds[1], TraitBound)
        assert isinstance(ty.bounds[2], LifetimeBound)
        args = ty.bounds[0].path.segments[-1].arguments
        assert args is not None
        binding = args.args[0]
        assert isinstance(binding, AssocType)
        assert binding.ident == "Item"
        assert format_type(binding.ty) == "Vec<i32>"

    def test_lifetime_and_const_args_are_opaque(self) -> None:
        ty = parse_type("Foo<'a, 4, T>")
        assert isinstance(ty, PathType)
        args = ty.segments[-1].arguments
        assert args is not None
        assert isinstance(args.args[0], OpaqueArg)
        assert isinstance(args.args[1], OpaqueArg)
        assert isinstance(args.args[2], TypeArg)

    def test_dyn_is_opaque(self) -> None:
        ty = parse_type("Box<dyn Error + Send>")
        assert format_type(ty) == "Box<dyn Error + Send>"


class TestRoundTrip:
    @pytest.mark.parametrize(
        "text",
        [
            "&'static [Option<Foo>]",
            "impl Stream<Item = Result<Foo, Error>> + Send",
            "crate::model::Node<'a>",
        ],
    )
    def test_format_inverts_parse(self, text: str) -> None:
        assert format_type(parse_type(text)) == text

    def test_leaf_names_in_source_order(self, leaf_names: Callable[[Type], list[str]]) -> None:
        assert leaf_names(parse_type("Vec<(&[Foo; 2])>")) == ["Vec", "Foo"]


class TestSpans:
    def test_segment_span(self) -> None:
        ty = parse_type("Vec<Foo>")
        assert isinstance(ty, PathType)
        assert ty.span == Span(1, 1)
        inner = ty.segments[0].arguments.args[0].ty
        assert inner.span == Span(1, 5)

    def test_multiline_span(self) -> None:
        ty = parse_type("Vec<\n  Foo>")
        inner = ty.segments[0].arguments.args[0].ty
        assert inner.span == Span(2, 3)

    def test_origin_offset(self) -> None:
        ty = parse_type("Vec<Foo>", origin=Span(10, 5))
        assert ty.span == Span(10, 5)
        assert ty.segments[0].arguments.args[0].ty.span == Span(10, 9)


class TestOpaqueShapes:
    @pytest.mark.parametrize(
        ("text", "inner"),
        [
            ("Option<fn(u8) -> u8>", "fn(u8) -> u8"),
            ("Option<*const u8>", "*const u8"),
            ("Vec<Box<dyn Fn() -> u8>>", None),
            ("Vec<<T as Tr>::Out>", "<T as Tr>::Out"),
            ("Vec< <T as Tr>::Out>", "<T as Tr>::Out"),
            ("Vec<impl Fn(u8) -> u8>", "impl Fn(u8) -> u8"),
        ],
    )
    def test_shapes_outside_the_model_are_kept_as_text(self, text: str, inner: str | None) -> None:
        ty = parse_type(text)
        assert isinstance(ty, PathType)
        args = ty.segments[-1].arguments
        assert args is not None
        arg = args.args[0]
        assert isinstance(arg, TypeArg)
        if inner is not None:
            assert isinstance(arg.ty, OtherType)
            assert arg.ty.text == inner

    def test_never_type(self) -> None:
        ty = parse_type("!")
        assert isinstance(ty, OtherType)
        assert ty.text == "!"


class TestParseErrors:
    @pytest.mark.parametrize("text", ["Vec<u8", "Vec<u8>>", "Foo $", "[u8; ]", ""])
    def test_invalid_syntax(self, text: str) -> None:
        with pytest.raises(TypeSyntaxError):
            parse_type(text)

    def test_error_span_is_relative_to_text(self) -> None:
        with pytest.raises(TypeSyntaxError) as info:
            parse_type("Vec<u8>>")
        assert info.value.span is not None
        assert info.value.span.line == 1

    def test_trailing_items_are_rejected(self) -> None:
        with pytest.raises(TypeSyntaxError, match="not a single type expression"):
            parse_type("Foo; struct Bar")


class TestAttributeTokens:
    def test_top_level_tokens(self) -> None:
        tokens = parse_attribute_tokens("strict_non_null = true, other(1, 2)")
        assert [t.text for t in tokens] == ["strict_non_null", "=", "true", ",", "other", "(1, 2)"]
        assert tokens[0].kind == "identifier"
        assert tokens[-1].kind == "token_tree"

    def test_empty(self) -> None:
        assert parse_attribute_tokens("") == []

    def test_unbalanced(self) -> None:
        with pytest.raises(TypeSyntaxError):
            parse_attribute_tokens("strict_non_null)")

"""
Type tree model.

The closed set of type-expression shapes a method result type can take:

- PathType        `Vec<Foo>`, `std::collections::HashSet<u8>`, `Foo`
- ArrayType       `[Foo; 4]`
- SliceType       `[Foo]`
- ReferenceType   `&'a Foo`, `&mut Foo`
- ParenType       `(Foo)`
- ImplTraitType   `impl Stream<Item = Foo> + Send`
- OtherType       anything else, carried as opaque text

Nodes are mutable: the wrap pass replaces the field type inside the method
signature in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Span:
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass
class TypeArg:
    ty: Type


@dataclass
class AssocType:
    # `Item = T` binding inside angle brackets.
    ident: str
    ty: Type


@dataclass
class OpaqueArg:
    # Lifetimes, const expressions.
    text: str


GenericArg = TypeArg | AssocType | OpaqueArg


@dataclass
class AngleBracketed:
    args: list[GenericArg] = field(default_factory=list)


@dataclass
class PathSegment:
    ident: str
    arguments: AngleBracketed | None = None
    span: Span | None = None


@dataclass
class PathType:
    segments: list[PathSegment] = field(default_factory=list)
    leading_colon: bool = False
    span: Span | None = None

    @classmethod
    def from_names(cls, *names: str, leading_colon: bool = False, args: list[Type] | None = None) -> PathType:
        # Builds `a::b::C<args...>`; args attach to the last segment.
        segments = [PathSegment(ident=name) for name in names]
        if args is not None and len(segments) > 0:
            segments[-1].arguments = AngleBracketed(args=[TypeArg(ty=a) for a in args])
        return cls(segments=segments, leading_colon=leading_colon)

    @property
    def last(self) -> PathSegment | None:
        return self.segments[-1] if len(self.segments) > 0 else None


@dataclass
class ArrayType:
    elem: Type
    length: str
    span: Span | None = None


@dataclass
class SliceType:
    elem: Type
    span: Span | None = None


@dataclass
class ReferenceType:
    elem: Type
    lifetime: str | None = None
    mutable: bool = False
    span: Span | None = None


@dataclass
class ParenType:
    elem: Type
    span: Span | None = None


@dataclass
class TraitBound:
    path: PathType


@dataclass
class LifetimeBound:
    lifetime: str


@dataclass
class ImplTraitType:
    bounds: list[TraitBound | LifetimeBound] = field(default_factory=list)
    span: Span | None = None


@dataclass
class OtherType:
    text: str
    span: Span | None = None


Type = PathType | ArrayType | SliceType | ReferenceType | ParenType | ImplTraitType | OtherType


"""
Shared pass context for the per-method passes.

Built once per impl block: the outer macro kind and the wrapper source are
resolved up front, so pass modules stay focused on "when to apply" and "what
shape to emit".
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum

from ..config.wrapper_source import WrapperSource, resolve_wrapper_source
from ..syntax.render import DEFAULT_REINTERPRET, DEFAULT_STREAM_MAP
from ..syntax.types import AngleBracketed, PathSegment, PathType, Type, TypeArg
from .bins import SEMANTIC_NON_NULL_NAME, STRICT_NON_NULL_NAME


class MacroKind(Enum):
    OBJECT = "Object"
    COMPLEX_OBJECT = "ComplexObject"
    INTERFACE = "Interface"
    SUBSCRIPTION = "Subscription"

    @classmethod
    def from_attribute_name(cls, name: str) -> MacroKind | None:
        for kind in cls:
            if kind.value == name:
                return kind
        return None


@dataclass(frozen=True)
class PassContext:
    macro_kind: MacroKind
    # Where the marker types live, e.g. `::async_graphql_semantic_nullability` or `crate`.
    wrapper_source: WrapperSource
    semantic_non_null: str = SEMANTIC_NON_NULL_NAME
    strict_non_null: str = STRICT_NON_NULL_NAME
    # Same-layout conversion used by the body shim.
    reinterpret_fn: PathType = field(default_factory=lambda: deepcopy(DEFAULT_REINTERPRET))
    # Lazy per-element map used for subscription streams.
    stream_map_fn: PathType = field(default_factory=lambda: deepcopy(DEFAULT_STREAM_MAP))

    @classmethod
    def build(cls, macro_kind: MacroKind, wrapper_source: WrapperSource | None = None) -> PassContext:
        if wrapper_source is None:
            wrapper_source = resolve_wrapper_source()
        return cls(macro_kind=macro_kind, wrapper_source=wrapper_source)

    @property
    def is_subscription(self) -> bool:
        return self.macro_kind is MacroKind.SUBSCRIPTION

    def marker_name(self, is_strict: bool) -> str:
        return self.strict_non_null if is_strict else self.semantic_non_null

    def wrap(self, inner: Type, is_strict: bool) -> PathType:
        # `<wrapper_source>::<Marker><inner>`
        segments = [PathSegment(ident=name) for name in self.wrapper_source.segments]
        segments.append(
            PathSegment(
                ident=self.marker_name(is_strict),
                arguments=AngleBracketed(args=[TypeArg(ty=inner)]),
            )
        )
        return PathType(segments=segments, leading_colon=self.wrapper_source.leading_colon)

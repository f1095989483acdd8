"""
Outer attribute coordinator.

Entry point of the transform: finds the single supported async-graphql
attribute on an impl block, tags it with the `semantic_non_null` sentinel and
visits every method exactly once, running the method passes in order.
Diagnostics are aggregated; the (partially) transformed block is always
returned.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path

import structlog

from .config.wrapper_source import WrapperSource, WrapperSourceError, resolve_wrapper_source
from .diagnostics import Diagnostic, DiagnosticError, ErrorAggregator
from .metadata.attribute_meta import AttributeMeta
from .passes import apply_extract_field_type, apply_rewrite_body, apply_wrap_field_type
from .passes.bins import OUTER_SENTINEL
from .passes.context import MacroKind, PassContext
from .syntax.items import Attribute, ImplBlock, Method
from .syntax.render import format_impl_block, format_type

logger = structlog.get_logger(__name__)

MISSING_MACRO_MESSAGE = "Expected the impl block to have one of the supported async-graphql attribute macros"
MULTIPLE_MACROS_MESSAGE = "Multiple async-graphql attribute macros found"


@dataclass
class TransformResult:
    block: ImplBlock
    error: DiagnosticError | None = None
    macro_kind: MacroKind | None = None
    wrapped_methods: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return self.error.diagnostics if self.error is not None else ()

    def compile_error(self) -> str | None:
        return self.error.to_compile_error() if self.error is not None else None

    def render(self) -> str:
        # Block first so unrelated build diagnostics stay visible.
        compile_error = self.compile_error()
        if compile_error is None:
            return format_impl_block(self.block)
        return f"{format_impl_block(self.block)}\n{compile_error}"


def with_sentinel(attr: Attribute) -> Attribute:
    if attr.style == "path" or attr.tokens.strip() == "":
        tokens = OUTER_SENTINEL
    else:
        tokens = f"{attr.tokens}, {OUTER_SENTINEL}"
    return Attribute(path=attr.path, style="list", tokens=tokens, span=attr.span)


def find_macro(block: ImplBlock) -> tuple[int, MacroKind]:
    found: tuple[int, MacroKind] | None = None
    for index, attr in enumerate(block.attrs):
        if attr.style == "name_value":
            continue
        kind = MacroKind.from_attribute_name(attr.name)
        if kind is None:
            continue
        if found is not None:
            raise DiagnosticError.at(MULTIPLE_MACROS_MESSAGE, attr.span)
        found = (index, kind)
    if found is None:
        raise DiagnosticError.at(MISSING_MACRO_MESSAGE, block.span)
    return found


class SemanticNonNullTransform:
    def __init__(
        self,
        block: ImplBlock,
        wrapper_source: WrapperSource | None = None,
        manifest_path: Path | None = None,
    ):
        self.block = block
        self.wrapper_source = wrapper_source
        self.manifest_path = manifest_path
        self.errors = ErrorAggregator()
        self.wrapped_methods: list[str] = []

    def _result(self, macro_kind: MacroKind | None = None) -> TransformResult:
        if len(self.errors) > 0:
            logger.warning("transform_diagnostics", count=len(self.errors))
        return TransformResult(
            block=self.block,
            error=self.errors.into_error(),
            macro_kind=macro_kind,
            wrapped_methods=tuple(self.wrapped_methods),
        )

    def transform_method(self, method: Method, ctx: PassContext):
        try:
            meta = AttributeMeta.take(method)
        except DiagnosticError as exc:
            self.errors.push(exc)
            return

        if method.output is None:
            logger.debug("method_skipped", method=method.name, reason="no_output")
            return

        orig_return_type = deepcopy(method.output)
        slot = apply_extract_field_type(method.output, lambda new: setattr(method, "output", new), ctx)
        if slot is None:
            logger.debug("method_skipped", method=method.name, reason="unrecognized_shape")
            return

        try:
            orig_field_type, new_field_type = apply_wrap_field_type(slot, meta.strict_non_null, ctx)
        except DiagnosticError as exc:
            self.errors.push(exc)
            return

        method.body = apply_rewrite_body(
            method.body,
            orig_return_type,
            deepcopy(method.output),
            orig_field_type,
            new_field_type,
            slot.streaming,
            ctx,
        )
        self.wrapped_methods.append(method.name)
        logger.debug(
            "method_wrapped",
            method=method.name,
            field_type=format_type(new_field_type),
            strict=meta.strict_non_null,
            streaming=slot.streaming,
        )

    def run(self) -> TransformResult:
        try:
            index, macro_kind = find_macro(self.block)
        except DiagnosticError as exc:
            self.errors.push(exc)
            return self._result()
        logger.debug("macro_kind_detected", kind=macro_kind.value)

        try:
            wrapper_source = self.wrapper_source or resolve_wrapper_source(self.manifest_path)
        except WrapperSourceError as exc:
            self.errors.push(Diagnostic(message=str(exc), span=self.block.span))
            return self._result(macro_kind)

        self.block.attrs[index] = with_sentinel(self.block.attrs[index])
        ctx = PassContext.build(macro_kind, wrapper_source)
        for method in self.block.methods():
            self.transform_method(method, ctx)
        return self._result(macro_kind)


def transform_impl(
    block: ImplBlock,
    wrapper_source: WrapperSource | None = None,
    manifest_path: Path | None = None,
) -> TransformResult:
    return SemanticNonNullTransform(block, wrapper_source=wrapper_source, manifest_path=manifest_path).run()

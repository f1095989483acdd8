"""
semnull: semantic-nullability transform for async-graphql impl blocks.

Wraps each field's result type in `SemanticNonNull` (or `StrictNonNull`) and
rewrites the field body to convert the original value into the wrapped type.
"""

from .config.wrapper_source import WrapperSource, WrapperSourceError, resolve_wrapper_source
from .diagnostics import Diagnostic, DiagnosticError, ErrorAggregator
from .errors import SemnullError
from .metadata.attribute_meta import AttributeMeta
from .passes.context import MacroKind, PassContext
from .syntax import parse_type, format_type
from .transformer import SemanticNonNullTransform, TransformResult, transform_impl

__version__ = "0.1.0"

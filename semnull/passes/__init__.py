"""
Pass registry for the semantic-nullability transform.

The coordinator runs these per method, in order. Each pass either:
- returns its product (field slot, wrapped type pair, rewritten body), or
- returns no-op (`None`) when the method is not a schema field,
- raises `DiagnosticError` on a structural problem.
"""

from .extract_field_type import FieldSlot
from .extract_field_type import PASS_NAME as EXTRACT_FIELD_TYPE
from .extract_field_type import apply as apply_extract_field_type
from .wrap_field_type import PASS_NAME as WRAP_FIELD_TYPE
from .wrap_field_type import apply as apply_wrap_field_type
from .rewrite_body import PASS_NAME as REWRITE_BODY
from .rewrite_body import apply as apply_rewrite_body


# Ordered method-pass pipeline.
PASS_NAMES = (
    EXTRACT_FIELD_TYPE,
    WRAP_FIELD_TYPE,
    REWRITE_BODY,
)

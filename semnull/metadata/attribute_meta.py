from __future__ import annotations

from dataclasses import dataclass

import structlog

from ..diagnostics import DiagnosticError
from ..passes.bins import OPTIONS_ATTRIBUTE_NAME, STRICT_FLAG_NAME
from ..syntax.items import Attribute, Method
from ..syntax.parse import TypeSyntaxError, parse_attribute_tokens

logger = structlog.get_logger(__name__)

BOOL_LITERALS = {"true": True, "false": False}


@dataclass(frozen=True)
class AttributeMeta:
    strict_non_null: bool = False

    @staticmethod
    def _parse_items(tokens: str) -> dict[str, bool]:
        # `strict_non_null` or `strict_non_null = true|false`, comma separated.
        items: dict[str, bool] = {}
        toks = parse_attribute_tokens(tokens)
        pos = 0
        while pos < len(toks):
            key = toks[pos]
            if key.kind != "identifier":
                raise ValueError(f"expected an option name, found `{key.text}`")
            if key.text != STRICT_FLAG_NAME:
                raise ValueError(f"Unknown field: `{key.text}`")
            if key.text in items:
                raise ValueError(f"Duplicate field `{key.text}`")
            pos += 1
            value = True
            if pos < len(toks) and toks[pos].text == "=":
                if pos + 1 >= len(toks) or toks[pos + 1].text not in BOOL_LITERALS:
                    raise ValueError(f"`{key.text}` expects a boolean literal")
                value = BOOL_LITERALS[toks[pos + 1].text]
                pos += 2
            items[key.text] = value
            if pos < len(toks):
                if toks[pos].text != ",":
                    raise ValueError(f"expected `,`, found `{toks[pos].text}`")
                pos += 1
        return items

    @classmethod
    def from_attribute(cls, attr: Attribute) -> AttributeMeta:
        try:
            if attr.style == "path":
                return cls()
            if attr.style != "list":
                raise ValueError("name-value form is not supported")
            items = cls._parse_items(attr.tokens)
        except (ValueError, TypeSyntaxError) as exc:
            logger.debug("attribute_meta_invalid", reason=str(exc), span=str(attr.span))
            raise DiagnosticError.at(f"Invalid attribute values for `{OPTIONS_ATTRIBUTE_NAME}`", attr.span) from exc
        return cls(strict_non_null=items.get(STRICT_FLAG_NAME, False))

    @classmethod
    def take(cls, method: Method) -> AttributeMeta:
        """Remove the option attribute from *method* and parse it.

        The attribute never reaches the schema framework, even when it fails
        to parse. Absent attribute → default options.
        """
        for index, attr in enumerate(method.attrs):
            if attr.is_ident(OPTIONS_ATTRIBUTE_NAME):
                del method.attrs[index]
                return cls.from_attribute(attr)
        return cls()

"""Wrapper-source resolution.

Answers how the consuming crate names the wrapper crate: `crate` inside the
wrapper crate itself, `::<dependency key>` when it is a (possibly renamed)
dependency. Resolved once per impl block and handed to the passes through
`PassContext`.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from ..errors import SemnullError

logger = structlog.get_logger(__name__)

WRAPPER_CRATE_NAME = "async-graphql-semantic-nullability"
MANIFEST_FILENAME = "Cargo.toml"
MANIFEST_DIR_ENV_VAR = "CARGO_MANIFEST_DIR"
DEPENDENCY_TABLES = ("dependencies", "dev-dependencies", "build-dependencies")


class WrapperSourceError(SemnullError):
    pass


@dataclass(frozen=True)
class WrapperSource:
    segments: tuple[str, ...]
    leading_colon: bool = True

    @classmethod
    def itself(cls) -> WrapperSource:
        return cls(segments=("crate",), leading_colon=False)

    @classmethod
    def named(cls, crate_name: str) -> WrapperSource:
        return cls(segments=(crate_name.replace("-", "_"),), leading_colon=True)

    @classmethod
    def default(cls) -> WrapperSource:
        return cls.named(WRAPPER_CRATE_NAME)

    @classmethod
    def parse(cls, text: str) -> WrapperSource:
        """Parse `::a::b` or `crate` style paths."""
        text = text.strip()
        leading_colon = text.startswith("::")
        segments = tuple(s for s in text.removeprefix("::").split("::"))
        if len(segments) == 0 or any(not s.isidentifier() for s in segments):
            raise WrapperSourceError(f"invalid wrapper source path: {text!r}")
        return cls(segments=segments, leading_colon=leading_colon)

    def __str__(self) -> str:
        return ("::" if self.leading_colon else "") + "::".join(self.segments)


def find_manifest(start: Path | None = None) -> Path | None:
    """Locate the consuming crate's Cargo.toml.

    Checks CARGO_MANIFEST_DIR first, then walks up from *start* (default: cwd).
    """
    env_dir = os.environ.get(MANIFEST_DIR_ENV_VAR)
    if env_dir:
        candidate = Path(env_dir) / MANIFEST_FILENAME
        return candidate if candidate.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / MANIFEST_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _load_manifest(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise WrapperSourceError(f"could not read {path}: {exc}") from exc


def _dependency_key(manifest: dict[str, Any], crate_name: str) -> str | None:
    for table_name in DEPENDENCY_TABLES:
        table = manifest.get(table_name, {})
        for key, spec in table.items():
            package = spec.get("package", key) if isinstance(spec, dict) else key
            if package == crate_name:
                return key
    return None


def resolve_wrapper_source(
    manifest_path: Path | None = None,
    crate_name: str = WRAPPER_CRATE_NAME,
) -> WrapperSource:
    if manifest_path is None:
        manifest_path = find_manifest()
    if manifest_path is None:
        source = WrapperSource.named(crate_name)
        logger.debug("wrapper_source_default", source=str(source))
        return source

    manifest = _load_manifest(manifest_path)
    if manifest.get("package", {}).get("name") == crate_name:
        source = WrapperSource.itself()
    else:
        key = _dependency_key(manifest, crate_name)
        if key is None:
            raise WrapperSourceError(f"crate `{crate_name}` is not a dependency in {manifest_path}")
        source = WrapperSource.named(key)
    logger.debug("wrapper_source_resolved", manifest=str(manifest_path), source=str(source))
    return source

"""Configuration resolved once per invocation: wrapper source and logging."""

from .logging import configure_logging
from .wrapper_source import WrapperSource, WrapperSourceError, resolve_wrapper_source

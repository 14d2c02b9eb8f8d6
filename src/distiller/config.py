"""ContextVar-based distill configuration.

A DistillConfig can be passed to each Distiller explicitly. When it is not,
the Distiller reads the ambient default for the current context, which callers
set with the helpers below.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so setting a default in one thread never leaks into another.

Usage:
    # Explicit config
    distiller = Distiller(DistillConfig(max_length=200))

    # Ambient default for a block of code
    with distill_config_context(DistillConfig(normalize_whitespace=True)):
        html = distill(source)

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

from distiller.errors import ConfigError

ELLIPSIS_ENTITY = "&hellip;"
ELLIPSIS = "..."


@dataclass(frozen=True, slots=True)
class DistillConfig:
    """Immutable distill configuration.

    Attributes:
        max_length: Maximum number of plain-text characters to emit (markup
            does not count). 0 means unlimited.
        normalize_whitespace: Collapse whitespace runs, normalize line endings
            and cap consecutive line feeds at two.
        balance_tags: Auto-close and repair mismatched tags.
        encode_non_ascii: Write non-ASCII and control characters as entities.
            When False, entity references in text are decoded instead.
        truncation_indicator: Suffix written when max_length cut the text
            short. None selects the default ellipsis; "" disables it.

    """

    max_length: int = 0
    normalize_whitespace: bool = False
    balance_tags: bool = True
    encode_non_ascii: bool = True
    truncation_indicator: str | None = None

    def __post_init__(self) -> None:
        if self.max_length < 0:
            raise ConfigError("max_length", f"must be >= 0, got {self.max_length}")

    @property
    def effective_truncation_indicator(self) -> str:
        """Truncation suffix after applying the ellipsis default."""
        if self.truncation_indicator is None:
            return ELLIPSIS_ENTITY if self.encode_non_ascii else ELLIPSIS
        return self.truncation_indicator

    @classmethod
    def from_dict(cls, config_dict: dict) -> DistillConfig:
        """Create DistillConfig from dictionary.

        Only includes keys that are valid DistillConfig fields; unknown keys
        are silently ignored.

        Example:
            >>> config = DistillConfig.from_dict({
            ...     "max_length": 140,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.max_length
            140

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: DistillConfig = DistillConfig()

_distill_config: ContextVar[DistillConfig] = ContextVar(
    "distill_config",
    default=_DEFAULT_CONFIG,
)


def get_distill_config() -> DistillConfig:
    """Get the distill configuration for the current context."""
    return _distill_config.get()


def set_distill_config(config: DistillConfig) -> None:
    """Set the distill configuration for the current context."""
    _distill_config.set(config)


def reset_distill_config() -> None:
    """Reset to the module-level default configuration."""
    _distill_config.set(_DEFAULT_CONFIG)


@contextmanager
def distill_config_context(config: DistillConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with distill_config_context(DistillConfig(max_length=10)):
        ...     get_distill_config().max_length
        10

    """
    previous = _distill_config.get()
    _distill_config.set(config)
    try:
        yield
    finally:
        _distill_config.set(previous)


__all__ = [
    "DistillConfig",
    "ELLIPSIS",
    "ELLIPSIS_ENTITY",
    "get_distill_config",
    "set_distill_config",
    "reset_distill_config",
    "distill_config_context",
]

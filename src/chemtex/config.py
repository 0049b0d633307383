"""ContextVar-based translation configuration for chemtex.

Provides thread-local configuration using Python's ContextVars (PEP 567).
Config is set once per Translator call, read by the interpreter and the
public API in the same context.

Thread Safety:
    ContextVars are thread-local. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    # Direct interpreter usage (advanced)
    from chemtex.config import TranslateConfig, set_translate_config, reset_translate_config

    set_translate_config(TranslateConfig(stagnation_limit=20))
    try:
        nodes = Interpreter().run("H2O", "ce")
    finally:
        reset_translate_config()

    # Or use the context manager
    with translate_config_context(TranslateConfig(outer_braces=False)):
        tex = translate("H2O", "equation")

"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True, slots=True)
class TranslateConfig:
    """Immutable translation configuration.

    Attributes:
        stagnation_limit: Iterations without consuming input before the
            interpreter aborts with StagnationError
        outer_braces: Wrap equation/unit output in one brace pair

    """

    stagnation_limit: int = 10
    outer_braces: bool = True

    @classmethod
    def from_dict(cls, config_dict: dict) -> "TranslateConfig":
        """Create TranslateConfig from dictionary.

        Only includes keys that are valid TranslateConfig fields; unknown keys
        are silently ignored.

        Example:
            >>> config = TranslateConfig.from_dict({"stagnation_limit": 5, "other": 1})
            >>> config.stagnation_limit
            5

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: TranslateConfig = TranslateConfig()

_translate_config: ContextVar[TranslateConfig] = ContextVar(
    "translate_config",
    default=_DEFAULT_CONFIG,
)


def get_translate_config() -> TranslateConfig:
    """Get current translation configuration (thread-local)."""
    return _translate_config.get()


def set_translate_config(config: TranslateConfig) -> None:
    """Set translation configuration for the current context."""
    _translate_config.set(config)


def reset_translate_config() -> None:
    """Reset to the default configuration singleton."""
    _translate_config.set(_DEFAULT_CONFIG)


@contextmanager
def translate_config_context(config: TranslateConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with translate_config_context(TranslateConfig(stagnation_limit=3)):
        ...     get_translate_config().stagnation_limit
        3

    """
    previous = _translate_config.get()
    _translate_config.set(config)
    try:
        yield
    finally:
        _translate_config.set(previous)


__all__ = [
    "TranslateConfig",
    "get_translate_config",
    "set_translate_config",
    "reset_translate_config",
    "translate_config_context",
]

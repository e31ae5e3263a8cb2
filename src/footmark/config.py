"""Configuration for parsing and serializing.

Parse configuration follows the ContextVar pattern (PEP 567): it is set for
the duration of one ``parse()`` call and read by the lexer, so nested or
concurrent calls never see each other's settings.

Serialize configuration is a plain frozen value passed to each
``to_markdown()`` call.

Usage:
    from footmark.config import ParseConfig, parse_config_context

    with parse_config_context(ParseConfig(footnotes_enabled=True)):
        events = list(Lexer(source).tokenize())

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, fields
from typing import Any

from footmark.errors import ConfigError

# Longest footnote label the tokenizer accepts, in characters.
MAX_LABEL_LENGTH = 999


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable parse configuration.

    Attributes:
        footnotes_enabled: Recognize [^label] calls and [^label]: definitions
        max_label_length: Longest accepted footnote label

    """

    footnotes_enabled: bool = False
    max_label_length: int = MAX_LABEL_LENGTH

    def __post_init__(self) -> None:
        if self.max_label_length < 1:
            raise ConfigError(f"max_label_length must be positive, got {self.max_label_length}")

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "ParseConfig":
        """Create ParseConfig from a dictionary.

        Only keys that are ParseConfig fields are used; unknown keys are
        ignored.

        Example:
            >>> ParseConfig.from_dict({"footnotes_enabled": True, "other": 1})
            ParseConfig(footnotes_enabled=True, max_label_length=999)

        """
        return cls(**_known_fields(cls, config_dict))


@dataclass(frozen=True, slots=True)
class SerializeConfig:
    """Immutable serialize configuration.

    Attributes:
        bullet: Marker for bullet list items
        bullet_other: Marker used for a list that directly follows another
            list, so the two are not merged when read back
        fence: Fence character for code blocks
        rule: Character repeated three times for thematic breaks
        fences: Write indented code blocks as fenced code too

    """

    bullet: str = "*"
    bullet_other: str = "-"
    fence: str = "`"
    rule: str = "*"
    fences: bool = True

    def __post_init__(self) -> None:
        if self.bullet not in ("*", "-", "+"):
            raise ConfigError(f"bullet must be one of '*', '-', '+', got {self.bullet!r}")
        if self.bullet_other not in ("*", "-", "+"):
            raise ConfigError(
                f"bullet_other must be one of '*', '-', '+', got {self.bullet_other!r}"
            )
        if self.bullet_other == self.bullet:
            raise ConfigError(f"bullet and bullet_other must differ, both are {self.bullet!r}")
        if self.fence not in ("`", "~"):
            raise ConfigError(f"fence must be '`' or '~', got {self.fence!r}")
        if self.rule not in ("*", "-", "_"):
            raise ConfigError(f"rule must be one of '*', '-', '_', got {self.rule!r}")

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "SerializeConfig":
        """Create SerializeConfig from a dictionary, ignoring unknown keys."""
        return cls(**_known_fields(cls, config_dict))


def _known_fields(cls: type, config_dict: dict[str, Any]) -> dict[str, Any]:
    valid_fields = {f.name for f in fields(cls)}
    return {k: v for k, v in config_dict.items() if k in valid_fields}


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ParseConfig = ParseConfig()

_parse_config: ContextVar[ParseConfig] = ContextVar(
    "footmark_parse_config",
    default=_DEFAULT_CONFIG,
)


def get_parse_config() -> ParseConfig:
    """Get the parse configuration of the current context."""
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Set parse configuration for the current context."""
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Reset the current context to the default configuration."""
    _parse_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with parse_config_context(ParseConfig(footnotes_enabled=True)):
        ...     get_parse_config().footnotes_enabled
        True

    """
    token = _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.reset(token)


__all__ = [
    "MAX_LABEL_LENGTH",
    "ParseConfig",
    "SerializeConfig",
    "get_parse_config",
    "parse_config_context",
    "reset_parse_config",
    "set_parse_config",
]

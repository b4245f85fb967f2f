"""Configuration for FTML parsing and terminal rendering.

Parse configuration is held in a ContextVar (PEP 567) so that the parser
reads it without threading options through every call, and concurrent
parses on different threads never see each other's settings. Render
configuration is passed explicitly to the renderer.

Usage:
    # Top-level API sets config internally
    doc = ftml.parse(source, strict_entities=True)

    # Direct parser usage
    from ftml.config import ParseConfig, parse_config_context

    with parse_config_context(ParseConfig(strict_entities=True)):
        doc = Parser(source).parse()

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

from ftml.errors import RenderError


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable parse configuration.

    Attributes:
        strict_entities: Reject ``&name;`` sequences other than the five
            XML-safe entities instead of passing them through as text.

    """

    strict_entities: bool = False

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "ParseConfig":
        """Create ParseConfig from a dictionary, ignoring unknown keys.

        Example:
            >>> ParseConfig.from_dict({"strict_entities": True, "x": 1})
            ParseConfig(strict_entities=True)

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Immutable terminal render configuration.

    Attributes:
        width: Total output width in columns (must be >= 1)
        ansi: Emit ANSI SGR escapes instead of ASCII sigils
        link_footnotes: Mark links with ``[n]`` and list their targets
            after each top-level paragraph
        osc8_hyperlinks: In ANSI mode, also wrap link text and listed
            targets in OSC 8 sequences so terminals make them clickable
        skip_mailto_footnotes: Give no ``[n]`` to a ``mailto:`` link whose
            text already shows the address
        link_references_in_place: List targets right after the paragraph
            that introduced them, under that paragraph's container prefix,
            instead of after the enclosing top-level paragraph

    """

    width: int = 80
    ansi: bool = False
    link_footnotes: bool = True
    osc8_hyperlinks: bool = False
    skip_mailto_footnotes: bool = False
    link_references_in_place: bool = False

    def __post_init__(self) -> None:
        if self.width < 1:
            raise RenderError(f"width must be a positive integer, got {self.width}")

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "RenderConfig":
        """Create RenderConfig from a dictionary, ignoring unknown keys."""
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ParseConfig = ParseConfig()

_parse_config: ContextVar[ParseConfig] = ContextVar(
    "ftml_parse_config",
    default=_DEFAULT_CONFIG,
)


def get_parse_config() -> ParseConfig:
    """Get the parse configuration active in this context."""
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Set the parse configuration for the current context."""
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Reset to the default configuration."""
    _parse_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Use ``config`` within the block, restoring the previous one afterwards.

    Example:
        >>> with parse_config_context(ParseConfig(strict_entities=True)):
        ...     get_parse_config().strict_entities
        True

    """
    previous = _parse_config.get()
    _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.set(previous)


__all__ = [
    "ParseConfig",
    "RenderConfig",
    "get_parse_config",
    "parse_config_context",
    "reset_parse_config",
    "set_parse_config",
]

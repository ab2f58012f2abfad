"""Cross-cutting helpers with no domain dependencies."""

from .parsers import parse_command

__all__ = ["parse_command"]

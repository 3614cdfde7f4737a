"""Dataclass model introspection: column naming, tag parsing, column maps and version fields."""

__version__ = "0.1.0"

__all__ = ["naming", "schema"]
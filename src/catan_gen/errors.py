"""Errors raised while editing or solving boards."""

from typing import Any


class BoardGenError(Exception):
    """Base class for board generation errors."""


class IncompatibleTemplateError(BoardGenError, ValueError):
    """The template cannot be satisfied by the field (size or pinned counts)."""


class NoAllowedTypesError(BoardGenError, ValueError):
    """A tile has no type it may take under the template."""

    def __init__(self, tile: Any) -> None:
        super().__init__(
            f"No allowed tile types exist for tile at {tile.position.key} "
            f"({tile.type.value}) given the template"
        )
        self.tile = tile


class TileNotFoundError(BoardGenError, LookupError):
    """No tile exists at the given position."""

    def __init__(self, position: Any) -> None:
        super().__init__(f"No tile exists in field at position {position!r}")
        self.position = position


class InconsistentModelError(BoardGenError, RuntimeError):
    """The solved model contradicts the rule set (a rule is missing or wrong)."""


class SolveFailedError(BoardGenError):
    """A solve attempt produced no board."""


class UnsatisfiableError(SolveFailedError):
    """No board satisfies the rules and template."""


class IndeterminateError(SolveFailedError):
    """The engine gave up before deciding satisfiability."""

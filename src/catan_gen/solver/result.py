"""Outcomes of solving a board."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator

from catan_gen.errors import IndeterminateError, UnsatisfiableError
from catan_gen.map.field import Field


class SolveStatus(str, Enum):
    """Status of a solve attempt."""

    SOLVED = "solved"
    UNSATISFIABLE = "unsatisfiable"  # rules and template admit no board
    INDETERMINATE = "indeterminate"  # engine gave up (timeout, interrupt)


class SolveResult(BaseModel):
    """Result of a solve: either a fully resolved field, or a reason why not."""

    model_config = ConfigDict(frozen=True)

    status: SolveStatus
    field: Field | None = None
    reason: str | None = None

    @model_validator(mode="after")
    def _field_iff_solved(self) -> "SolveResult":
        """Only solved results carry a field."""
        if (self.status == SolveStatus.SOLVED) != (self.field is not None):
            raise ValueError(f"Field must be set exactly when solved: {self.status}")
        return self

    @property
    def ok(self) -> bool:
        """Whether a board was found."""
        return self.status == SolveStatus.SOLVED

    def unwrap(self) -> Field:
        """Get the solved field, raising if there is none."""
        match self.status:
            case SolveStatus.SOLVED:
                assert self.field is not None
                return self.field
            case SolveStatus.UNSATISFIABLE:
                raise UnsatisfiableError(
                    "No board satisfies the rules for this field and template."
                )
            case SolveStatus.INDETERMINATE:
                raise IndeterminateError(
                    f"Solver could not decide satisfiability: {self.reason}"
                )
        raise ValueError(f"Unknown status: {self.status!r}")

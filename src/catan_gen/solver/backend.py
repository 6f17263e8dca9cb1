"""Constraint engine backends.

Rules build constraints only through `ConstraintBackend`, so the engine can
be swapped without touching them. Integer expressions returned by a backend
support `==`, `!=`, `+`, `-`, `<=` and `>=` with other expressions or ints.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Iterable

import z3
from typing_extensions import Annotated
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

Expr = Any
"""Backend-specific expression (integer or boolean)."""


class CheckResult(str, Enum):
    """Outcome of a satisfiability check."""

    SAT = "sat"
    UNSAT = "unsat"
    UNKNOWN = "unknown"


class SolverSettings(BaseModel):
    """Settings passed to the constraint engine."""

    timeout_ms: Annotated[
        int | None,
        Field(ge=1, description="Give up after this long; unset means no limit."),
    ] = None
    random_seed: Annotated[
        int | None, Field(ge=0, description="Engine seed, to vary found boards.")
    ] = None


class ConstraintBackend(ABC):
    """Minimal contract of a constraint engine."""

    @abstractmethod
    def int_var(self, name: str) -> Expr:
        """Create an integer decision variable."""

    @abstractmethod
    def const(self, value: int) -> Expr:
        """Integer constant."""

    @abstractmethod
    def add(self, *constraints: Expr) -> None:
        """Add boolean constraints to the model."""

    @abstractmethod
    def any_of(self, exprs: Iterable[Expr]) -> Expr:
        """Disjunction (false when empty)."""

    @abstractmethod
    def all_of(self, exprs: Iterable[Expr]) -> Expr:
        """Conjunction (true when empty)."""

    @abstractmethod
    def negate(self, expr: Expr) -> Expr:
        """Boolean negation."""

    @abstractmethod
    def implies(self, premise: Expr, conclusion: Expr) -> Expr:
        """Implication."""

    @abstractmethod
    def if_then_else(self, cond: Expr, then: Expr | int, other: Expr | int) -> Expr:
        """Integer expression selected by a condition."""

    @abstractmethod
    def total(self, exprs: Iterable[Expr | int]) -> Expr:
        """Sum of integer expressions (zero when empty)."""

    @abstractmethod
    def check(self) -> CheckResult:
        """Decide satisfiability of everything added so far."""

    @abstractmethod
    def value_of(self, var: Expr) -> int:
        """Value of a variable in the found model (after a SAT check)."""

    @property
    def reason_unknown(self) -> str | None:
        """Why the last check was inconclusive, if known."""
        return None

    def interrupt(self) -> None:
        """Abort a running check and skip later ones, if the engine supports it."""


class Z3Backend(ConstraintBackend):
    """Backend using the Z3 SMT solver.

    Each instance owns its own Z3 context, so interrupting it does not
    affect other solves.
    """

    def __init__(self, settings: SolverSettings | None = None):
        self.settings = settings or SolverSettings()
        self._ctx = z3.Context()
        self._solver = z3.Solver(ctx=self._ctx)
        if self.settings.timeout_ms is not None:
            self._solver.set("timeout", self.settings.timeout_ms)
        if self.settings.random_seed is not None:
            self._solver.set("random_seed", self.settings.random_seed)
        self._model: z3.ModelRef | None = None
        self.interrupted = False
        self._checking = False

    def _as_expr(self, value: Expr | int) -> Expr:
        if isinstance(value, int):
            return z3.IntVal(value, self._ctx)
        return value

    def int_var(self, name: str) -> Expr:
        return z3.Int(name, self._ctx)

    def const(self, value: int) -> Expr:
        return z3.IntVal(value, self._ctx)

    def add(self, *constraints: Expr) -> None:
        self._solver.add(*constraints)

    def any_of(self, exprs: Iterable[Expr]) -> Expr:
        items = list(exprs)
        if not items:
            return z3.BoolVal(False, self._ctx)
        return z3.Or(*items)

    def all_of(self, exprs: Iterable[Expr]) -> Expr:
        items = list(exprs)
        if not items:
            return z3.BoolVal(True, self._ctx)
        return z3.And(*items)

    def negate(self, expr: Expr) -> Expr:
        return z3.Not(expr)

    def implies(self, premise: Expr, conclusion: Expr) -> Expr:
        return z3.Implies(premise, conclusion)

    def if_then_else(self, cond: Expr, then: Expr | int, other: Expr | int) -> Expr:
        return z3.If(cond, self._as_expr(then), self._as_expr(other))

    def total(self, exprs: Iterable[Expr | int]) -> Expr:
        items = [self._as_expr(x) for x in exprs]
        if not items:
            return self.const(0)
        return z3.Sum(*items)

    def check(self) -> CheckResult:
        self._checking = True
        try:
            if self.interrupted:
                logger.info("Z3 solver was interrupted before the check, skipping it.")
                return CheckResult.UNKNOWN
            res = self._solver.check()
        finally:
            self._checking = False
        if res == z3.sat:
            self._model = self._solver.model()
            return CheckResult.SAT
        if res == z3.unsat:
            return CheckResult.UNSAT
        return CheckResult.UNKNOWN

    def value_of(self, var: Expr) -> int:
        if self._model is None:
            raise RuntimeError("No model available - check() was not satisfiable.")
        return self._model.eval(var, model_completion=True).as_long()

    @property
    def reason_unknown(self) -> str | None:
        if self.interrupted:
            return "interrupted"
        return self._solver.reason_unknown()

    def interrupt(self) -> None:
        # A context interrupt only reaches a search that is already running
        if not self.interrupted:
            logger.info("Interrupting Z3 solver.")
        self.interrupted = True
        if self._checking:
            self._ctx.interrupt()

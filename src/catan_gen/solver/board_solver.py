"""Build the constraint model for a board, solve it and decode the result."""

import logging
import time
from enum import Enum
from typing import Sequence

from catan_gen.data.models import TOKEN_NONE, Tile, TileType, Token
from catan_gen.data.template import Template
from catan_gen.errors import IncompatibleTemplateError, InconsistentModelError
from catan_gen.map.field import Field
from catan_gen.solver.backend import (
    CheckResult,
    ConstraintBackend,
    SolverSettings,
    Z3Backend,
)
from catan_gen.solver.context import SolverContext
from catan_gen.solver.result import SolveResult, SolveStatus
from catan_gen.solver.rules import DEFAULT_RULES, Rule, apply_rules

logger = logging.getLogger(__name__)


class SolverState(str, Enum):
    """Lifecycle of a `BoardSolver`."""

    BUILDING = "building"
    DONE = "done"


class BoardSolver:
    """One-shot solver for a field and template.

    Build the model, check it once, then discard the solver. Create a new
    one for every solve request.
    """

    def __init__(
        self,
        field: Field,
        template: Template,
        *,
        rules: Sequence[Rule] | None = None,
        settings: SolverSettings | None = None,
        backend: ConstraintBackend | None = None,
    ):
        self.field = field
        self.template = template
        self.rules: tuple[Rule, ...] = tuple(DEFAULT_RULES if rules is None else rules)
        self.backend = backend if backend is not None else Z3Backend(settings)
        self.state = SolverState.BUILDING
        self.context: SolverContext | None = None

    def build(self) -> SolverContext:
        """Create variables and apply all rules (only once)."""
        if self.context is not None:
            return self.context
        if not self.template.is_compatible_with_field(self.field):
            raise IncompatibleTemplateError(
                "Template is not compatible with the field: "
                f"template size {self.template.size}, field size {self.field.size}, "
                "or more tiles are fixed than the template allows."
            )
        context = SolverContext(self.backend, self.field, self.template)
        apply_rules(context, self.rules)
        self.context = context
        return context

    def solve(self) -> SolveResult:
        """Check the model once and decode the outcome."""
        if self.state == SolverState.DONE:
            raise RuntimeError("This solver was already used; create a new one.")
        # A failed build leaves partial constraints behind
        self.state = SolverState.DONE
        context = self.build()

        t_start = time.monotonic()
        check = self.backend.check()
        logger.info(
            f"Solved {self.field.size} tiles: {check.value} "
            f"in {time.monotonic() - t_start:.3f} s"
        )

        match check:
            case CheckResult.SAT:
                return SolveResult(status=SolveStatus.SOLVED, field=self._decode(context))
            case CheckResult.UNSAT:
                return SolveResult(status=SolveStatus.UNSATISFIABLE)
            case CheckResult.UNKNOWN:
                return SolveResult(
                    status=SolveStatus.INDETERMINATE,
                    reason=self.backend.reason_unknown,
                )
        raise ValueError(f"Unknown check result: {check!r}")

    def interrupt(self) -> None:
        """Abort a running solve; it will end as indeterminate."""
        self.backend.interrupt()

    def _decode(self, context: SolverContext) -> Field:
        """Convert the found assignment into a new field."""
        tiles: list[Tile] = []
        for i, orig in enumerate(self.field.tiles):
            where = orig.position.key
            try:
                tile_type = TileType.from_code(
                    self.backend.value_of(context.type_vars[i])
                )
            except ValueError as ve:
                raise InconsistentModelError(f"Bad tile type at {where}") from ve
            if not tile_type.is_valid:
                raise InconsistentModelError(
                    f"Tile at {where} was left unresolved: {tile_type.value}"
                )
            token: Token | None = None
            if tile_type.is_resource:
                token_code = self.backend.value_of(context.token_vars[i])
                if token_code == TOKEN_NONE:
                    raise InconsistentModelError(
                        f"Resource tile at {where} was assigned no token."
                    )
                try:
                    token = Token.from_code(token_code)
                except ValueError as ve:
                    raise InconsistentModelError(f"Bad token at {where}") from ve
            tiles.append(Tile(position=orig.position, type=tile_type, token=token))
        return Field.from_tiles(tiles)

"""Shared state handed to rules while building the constraint model."""

import logging

from catan_gen.data.models import RESOURCE_TYPES, Token
from catan_gen.data.template import Template
from catan_gen.map.field import Field
from catan_gen.solver.backend import ConstraintBackend, Expr

logger = logging.getLogger(__name__)


class SolverContext:
    """Model handle, inputs and decision variables for a single solve.

    There is one type variable and one token variable per tile, in the
    field's canonical tile order. The field and template are read-only;
    rules only add constraints to `model`.
    """

    def __init__(self, model: ConstraintBackend, field: Field, template: Template):
        self.model = model
        self.field = field
        self.template = template
        self.type_vars: list[Expr] = [
            model.int_var(f"type_{i}") for i in range(field.size)
        ]
        self.token_vars: list[Expr] = [
            model.int_var(f"token_{i}") for i in range(field.size)
        ]
        logger.debug(f"Created {2 * field.size} variables for {field.size} tiles.")

    def is_resource(self, idx: int) -> Expr:
        """Tile `idx` is assigned a resource type."""
        var = self.type_vars[idx]
        return self.model.any_of(var == tt.code for tt in RESOURCE_TYPES)

    def pips(self, idx: int) -> Expr:
        """Pip count of the token on tile `idx` (0 without a token)."""
        var = self.token_vars[idx]
        expr: Expr = self.model.const(0)
        for tk in Token:
            expr = self.model.if_then_else(var == tk.code, tk.pips, expr)
        return expr

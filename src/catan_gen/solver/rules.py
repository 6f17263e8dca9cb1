"""Board rules, each adding constraints to the model.

Rules do not depend on each other; they only share the context's variables.
To add a rule, subclass `Rule` and append an instance to the rule list.
"""

import logging
from abc import abstractmethod
from itertools import combinations

from typing_extensions import Annotated
from pydantic import BaseModel, ConfigDict, Field

from catan_gen.data.models import (
    HIGH_PROBABILITY_TOKENS,
    NON_RESOURCE_TYPES,
    TOKEN_NONE,
    Token,
    VALID_TYPES,
)
from catan_gen.errors import NoAllowedTypesError
from catan_gen.solver.context import SolverContext

logger = logging.getLogger(__name__)


class Rule(BaseModel):
    """A rule for generated boards."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str

    @abstractmethod
    def apply(self, context: SolverContext) -> None:
        """Add this rule's constraints to the context's model."""


class TileTypeCountRule(Rule):
    """Restrict each tile's type and match the template's type counts."""

    name: str = "Allowed tile types count"
    description: str = (
        "Each tile takes a type it is allowed to become, and the number of "
        "tiles of each type equals the template count."
    )

    def apply(self, context: SolverContext) -> None:
        model = context.model
        for i, tile in enumerate(context.field.tiles):
            allowed = tile.allowed_substitutes_for_template(context.template)
            if len(allowed) == 0:
                raise NoAllowedTypesError(tile)
            var = context.type_vars[i]
            if len(allowed) == 1:
                model.add(var == allowed[0].code)
            else:
                model.add(model.any_of(var == tt.code for tt in allowed))

        for tt in VALID_TYPES:
            count = model.total(
                model.if_then_else(var == tt.code, 1, 0) for var in context.type_vars
            )
            model.add(count == context.template.type_count(tt))


class TokenCountRule(Rule):
    """Place tokens on resource tiles only and match the template's token counts."""

    name: str = "Allowed tokens count"
    description: str = (
        "Resource tiles carry a token from the template and other tiles carry "
        "none, and the number of each token equals the template count."
    )

    def apply(self, context: SolverContext) -> None:
        model = context.model
        allowed_tokens = context.template.allowed_tokens()
        for i, tile in enumerate(context.field.tiles):
            type_var = context.type_vars[i]
            token_var = context.token_vars[i]
            if tile.is_resource:
                assert tile.token is not None
                model.add(token_var == tile.token.code)
                continue
            if tile.is_valid:
                model.add(token_var == TOKEN_NONE)
                continue

            is_non_resource = model.any_of(
                type_var == tt.code for tt in NON_RESOURCE_TYPES
            )
            model.add(model.implies(is_non_resource, token_var == TOKEN_NONE))
            # With no allowed tokens this forbids resource types on the tile
            model.add(
                model.implies(
                    context.is_resource(i),
                    model.any_of(token_var == tk.code for tk in allowed_tokens),
                )
            )

        for tk in Token:
            count = model.total(
                model.if_then_else(var == tk.code, 1, 0) for var in context.token_vars
            )
            model.add(count == context.template.token_count(tk))


class NoSameNeighboringResourceRule(Rule):
    """Neighboring resource tiles have different resources."""

    name: str = "Neighboring resource tiles cannot have same resource"
    description: str = "Two neighboring resource tiles never share a resource type."

    def apply(self, context: SolverContext) -> None:
        model = context.model
        for i, j in context.field.neighbor_pairs():
            both_resource = model.all_of([context.is_resource(i), context.is_resource(j)])
            model.add(
                model.implies(both_resource, context.type_vars[i] != context.type_vars[j])
            )


class NoSameNeighboringTokenRule(Rule):
    """Neighboring tiles have different tokens."""

    name: str = "Neighboring tiles cannot have same token"
    description: str = "Two neighboring tiles with tokens never share a token."

    def apply(self, context: SolverContext) -> None:
        model = context.model
        tvs = context.token_vars
        for i, j in context.field.neighbor_pairs():
            both_tokens = model.all_of([tvs[i] != TOKEN_NONE, tvs[j] != TOKEN_NONE])
            model.add(model.implies(both_tokens, tvs[i] != tvs[j]))


class NoAdjacentHighProbabilityRule(Rule):
    """The most likely tokens (6 and 8) are never adjacent."""

    name: str = "No adjacent 6 or 8"
    description: str = "Tokens with the highest probability are never neighbors."

    def apply(self, context: SolverContext) -> None:
        model = context.model

        def is_high(var):
            return model.any_of(var == tk.code for tk in HIGH_PROBABILITY_TOKENS)

        tvs = context.token_vars
        for i, j in context.field.neighbor_pairs():
            model.add(model.negate(model.all_of([is_high(tvs[i]), is_high(tvs[j])])))


class BalancedResourceProbabilityRule(Rule):
    """Every resource type gets about the same total pips."""

    name: str = "Balanced resource probabilities"
    description: str = (
        "Total pips over the tiles of any two resource types differ by at most "
        "`max_difference`."
    )
    max_difference: Annotated[int, Field(ge=0)] = 1

    def apply(self, context: SolverContext) -> None:
        model = context.model
        pips = [context.pips(i) for i in range(context.field.size)]
        pip_sums = {
            rt: model.total(
                model.if_then_else(var == rt.code, pips[i], 0)
                for i, var in enumerate(context.type_vars)
            )
            for rt in context.template.allowed_resource_types()
        }
        for rt_a, rt_b in combinations(pip_sums, 2):
            diff = pip_sums[rt_a] - pip_sums[rt_b]
            model.add(diff <= self.max_difference, diff >= -self.max_difference)


class MaxIntersectionPipsRule(Rule):
    """Limit the pips touching any single intersection."""

    name: str = "Maximum pips per intersection"
    description: str = (
        "The pips of the (up to three) tokens around an intersection sum to at "
        "most `max_pips`."
    )
    max_pips: Annotated[int, Field(ge=0)] = 11

    def apply(self, context: SolverContext) -> None:
        model = context.model
        for triple in context.field.intersection_triples():
            load = model.total(context.pips(i) for i in triple)
            model.add(load <= self.max_pips)


DEFAULT_RULES: tuple[Rule, ...] = (
    TileTypeCountRule(),
    TokenCountRule(),
    NoSameNeighboringResourceRule(),
    NoSameNeighboringTokenRule(),
    NoAdjacentHighProbabilityRule(),
    BalancedResourceProbabilityRule(),
    MaxIntersectionPipsRule(),
)
"""Default rules, in the order they are applied."""


def default_rules() -> list[Rule]:
    """Get a fresh list of the default rules."""
    return list(DEFAULT_RULES)


def apply_rules(context: SolverContext, rules: list[Rule] | tuple[Rule, ...]) -> None:
    """Apply rules to the context, in order."""
    for rule in rules:
        logger.debug(f"Applying rule: {rule.name}")
        rule.apply(context)

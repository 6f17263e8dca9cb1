"""Helper for generating boards."""

import asyncio
import logging
from pathlib import Path
from typing import Sequence

from pydantic import BaseModel, Field as PydField
from pydantic_yaml import parse_yaml_file_as, to_yaml_str

from catan_gen.data import load_template_preset, templates_path
from catan_gen.data.models import Tile
from catan_gen.data.template import Template, TemplatePreset
from catan_gen.map.field import Field
from catan_gen.map.hexes import CoordLike
from catan_gen.solver.backend import ConstraintBackend, SolverSettings
from catan_gen.solver.board_solver import BoardSolver
from catan_gen.solver.result import SolveResult
from catan_gen.solver.rules import Rule, default_rules

logger = logging.getLogger(__name__)

PATH_TEMPLATES = templates_path
INTERRUPT_RETRY_S = 0.05


def generate_empty_field(radius: int) -> Field:
    """Create an all-empty field of the given radius."""
    return Field.empty(radius)


def default_template(field_size: int) -> Template:
    """Balanced default template for a field of `field_size` tiles."""
    return Template.default(field_size)


def create_default_template(radius: int) -> tuple[Template, Field]:
    """Create an empty field of `radius` and its default template."""
    field = Field.empty(radius)
    return Template.default(field.size), field


def replace_tile(field: Field, position: Tile | CoordLike, replacement: Tile) -> Field:
    """Replace the tile at a position, returning a new field."""
    return field.replace_tile(position, replacement)


def is_compatible_with_field(template: Template, field: Field) -> bool:
    """Whether the template can be used to complete the field."""
    return template.is_compatible_with_field(field)


def solve(
    field: Field,
    template: Template,
    *,
    rules: Sequence[Rule] | None = None,
    settings: SolverSettings | None = None,
) -> SolveResult:
    """Complete the field so that it matches the template and follows the rules.

    Raises `IncompatibleTemplateError` or `NoAllowedTypesError` on bad input;
    otherwise returns the solved field or the reason there is none.
    """
    return BoardSolver(field, template, rules=rules, settings=settings).solve()


async def solve_async(
    field: Field,
    template: Template,
    *,
    rules: Sequence[Rule] | None = None,
    settings: SolverSettings | None = None,
    backend: ConstraintBackend | None = None,
) -> SolveResult:
    """Like `solve`, but builds and searches in a worker thread.

    Cancelling the awaiting task interrupts the search. The cancellation is
    re-raised only after the worker has stopped.
    """
    solver = BoardSolver(
        field, template, rules=rules, settings=settings, backend=backend
    )
    worker = asyncio.ensure_future(asyncio.to_thread(solver.solve))
    try:
        return await asyncio.shield(worker)
    except asyncio.CancelledError:
        logger.warning("Solve cancelled, interrupting the solver.")
        while not worker.done():
            solver.interrupt()
            await asyncio.wait({worker}, timeout=INTERRUPT_RETRY_S)
        if not worker.cancelled() and worker.exception() is not None:
            logger.warning(f"Cancelled solve failed: {worker.exception()!r}")
        raise


def load_field(path: Path) -> Field:
    """Load a field from a YAML file."""
    return parse_yaml_file_as(Field, path)


def dump_field(field: Field) -> str:
    """Serialize a field to a YAML string."""
    return to_yaml_str(field)


class BoardGenHelper(BaseModel):
    """Board generation helper object."""

    path_templates: Path = PATH_TEMPLATES
    rules: list[Rule] = PydField(default_factory=default_rules)
    settings: SolverSettings = SolverSettings()

    def load_available_templates(self) -> list[TemplatePreset]:
        """Load all available template presets."""
        res: list[TemplatePreset] = []
        for yml_path in sorted(self.path_templates.rglob("*.yaml")):
            try:
                res.append(load_template_preset(yml_path))
            except Exception:
                logger.warning(f"Failed to load file as template: {yml_path!s}")
        return res

    def load_template(self, name: str) -> TemplatePreset:
        """Load a template preset with a given name."""
        return load_template_preset(self.path_templates / f"{name}.yaml")

    def create_board(self, preset: TemplatePreset) -> tuple[Template, Field]:
        """Create the template and an empty field for a preset."""
        return preset.to_template(), Field.empty(preset.radius)

    def solve(self, field: Field, template: Template) -> SolveResult:
        """Solve with this helper's rules and settings."""
        return solve(field, template, rules=self.rules, settings=self.settings)

    async def solve_async(self, field: Field, template: Template) -> SolveResult:
        """Solve in a worker thread with this helper's rules and settings."""
        return await solve_async(
            field, template, rules=self.rules, settings=self.settings
        )

    def generate(self, preset: TemplatePreset | str) -> SolveResult:
        """Generate a full board from a preset (or preset name)."""
        if isinstance(preset, str):
            preset = self.load_template(preset)
        template, field = self.create_board(preset)
        logger.info(f"Generating board {preset.name!r} with {field.size} tiles.")
        return self.solve(field, template)

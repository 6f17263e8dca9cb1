import threading

import pytest

from catan_gen.data.models import Tile, TileType, Token
from catan_gen.data.template import Template
from catan_gen.map.field import Field
from catan_gen.solver.backend import CheckResult, Z3Backend


class RecordingBackend(Z3Backend):
    """Z3 backend that records constraints, checks and interrupts."""

    def __init__(self, *args, forced_result: CheckResult | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.constraints: list[str] = []
        self.build_threads: set[int] = set()
        self.results: list[CheckResult] = []
        self.n_checks = 0
        self.n_interrupts = 0
        self.forced_result = forced_result

    def add(self, *constraints):
        self.build_threads.add(threading.get_ident())
        self.constraints.extend(str(c) for c in constraints)
        super().add(*constraints)

    def check(self) -> CheckResult:
        self.n_checks += 1
        if self.forced_result is not None:
            res = self.forced_result
        else:
            res = super().check()
        self.results.append(res)
        return res

    @property
    def reason_unknown(self) -> str | None:
        if self.forced_result == CheckResult.UNKNOWN:
            return "forced"
        return super().reason_unknown

    def interrupt(self) -> None:
        self.n_interrupts += 1
        super().interrupt()


@pytest.fixture
def recording_backend():
    return RecordingBackend


@pytest.fixture
def fixed_field() -> Field:
    """Three mutually adjacent fixed tiles."""
    return Field.from_tiles(
        [
            Tile(position=(0, 0), type=TileType.WATER),
            Tile(position=(0, 1), type=TileType.DESERT),
            Tile(position=(1, 0), type=TileType.FOREST, token=Token.TEN),
        ]
    )


@pytest.fixture
def fixed_template() -> Template:
    return Template(
        tile_types={TileType.WATER: 1, TileType.DESERT: 1, TileType.FOREST: 1},
        tokens={Token.TEN: 1},
    )


@pytest.fixture
def hard_board() -> tuple[Field, Template]:
    """Radius-3 field with the default template; the search runs for long."""
    field = Field.empty(3)
    return field, Template.default(field.size)

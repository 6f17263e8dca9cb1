import asyncio
import logging
from pathlib import Path

import pytest

from catan_gen.data.models import Tile, TileType, Token
from catan_gen.data.template import TemplatePreset
from catan_gen.gen_helper import (
    BoardGenHelper,
    create_default_template,
    default_template,
    dump_field,
    generate_empty_field,
    is_compatible_with_field,
    load_field,
    replace_tile,
)
from catan_gen.map.field import Field
from catan_gen.solver.result import SolveStatus
from catan_gen.solver.rules import DEFAULT_RULES


def test_api_functions():
    field = generate_empty_field(2)
    assert field.size == 19
    template = default_template(field.size)
    assert is_compatible_with_field(template, field)

    template_1, field_1 = create_default_template(1)
    assert field_1.size == 7
    assert template_1.size == 7

    desert = Tile(position=(0, 0), type=TileType.DESERT)
    assert replace_tile(field_1, (0, 0), desert).get_tile((0, 0)) == desert


def test_default_template_on_small_field_is_unsatisfiable():
    template, field = create_default_template(1)
    result = BoardGenHelper().solve(field, template)
    assert result.status == SolveStatus.UNSATISFIABLE


def test_available_templates():
    presets = BoardGenHelper().load_available_templates()
    assert {p.name for p in presets} == {"base_game", "small_island"}


def test_bad_template_file_is_skipped(tmp_path: Path, caplog):
    good = BoardGenHelper().load_template("small_island")
    (tmp_path / "good.yaml").write_text(
        (BoardGenHelper().path_templates / "small_island.yaml").read_text()
    )
    (tmp_path / "bad.yaml").write_text("name: broken\nradius: -3\n")
    helper = BoardGenHelper(path_templates=tmp_path)
    with caplog.at_level(logging.WARNING):
        presets = helper.load_available_templates()
    assert presets == [good]
    assert "bad.yaml" in caplog.text


def test_helper_defaults():
    helper = BoardGenHelper()
    assert helper.rules == list(DEFAULT_RULES)
    assert helper.settings.timeout_ms is None


def test_field_yaml_roundtrip(tmp_path: Path):
    field = Field.from_tiles(
        [
            Tile(position=(0, 0), type=TileType.DESERT),
            Tile(position=(1, 0), type=TileType.MOUNTAIN, token=Token.EIGHT),
            Tile.placeholder((0, 1)),
            Tile.empty((-1, 0)),
        ]
    )
    path = tmp_path / "field.yaml"
    path.write_text(dump_field(field))
    assert load_field(path) == field


def test_generate_small_island():
    helper = BoardGenHelper()
    preset = helper.load_template("small_island")
    assert isinstance(preset, TemplatePreset)
    result = helper.generate("small_island")
    assert result.status == SolveStatus.SOLVED
    solved = result.unwrap()
    assert solved.size == 7
    assert solved.is_resolved
    assert solved.count_by_type(TileType.DESERT) == 1
    assert sum(1 for t in solved.tiles if t.token is not None) == 6


def test_helper_solve_async():
    helper = BoardGenHelper()
    template, field = helper.create_board(helper.load_template("small_island"))
    result = asyncio.run(helper.solve_async(field, template))
    assert result.ok


def test_missing_template_name():
    with pytest.raises(OSError):
        BoardGenHelper().load_template("no_such_board")

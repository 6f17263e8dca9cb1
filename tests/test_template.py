import pytest
from pydantic import ValidationError

from catan_gen.data import base_game
from catan_gen.data.models import RESOURCE_TYPES, Tile, TileType, Token
from catan_gen.data.template import Template, TemplatePreset
from catan_gen.errors import IncompatibleTemplateError
from catan_gen.map.field import Field


def test_default_template_19():
    template = Template.default(19)
    assert template.type_count(TileType.DESERT) == 1
    assert template.type_count(TileType.WATER) == 0
    assert [template.type_count(tt) for tt in RESOURCE_TYPES] == [3] * 6
    assert template.size == 19


def test_default_template_7():
    template = Template.default(7)
    assert template.type_count(TileType.DESERT) == 1
    assert [template.type_count(tt) for tt in RESOURCE_TYPES] == [1] * 6


def test_default_template_remainder_goes_first():
    template = Template.default(21)
    assert [template.type_count(tt) for tt in RESOURCE_TYPES] == [4, 4, 3, 3, 3, 3]


def test_default_template_tokens():
    template = Template.default(37)
    assert template.token_total == 18
    assert template.token_count(Token.TWO) == 1
    assert template.token_count(Token.TWELVE) == 1
    assert template.token_count(Token.SIX) == 2


def test_default_template_too_small():
    with pytest.raises(ValueError):
        Template.default(0)


def test_missing_keys_count_as_zero():
    template = Template(tile_types={TileType.FOREST: 2})
    assert template.type_count(TileType.GOLD) == 0
    assert template.token_count(Token.NINE) == 0
    assert template.allowed_resource_types() == [TileType.FOREST]
    assert template.allowed_tokens() == []


def test_only_valid_types_allowed():
    with pytest.raises(ValidationError):
        Template(tile_types={TileType.EMPTY: 1})
    with pytest.raises(ValidationError):
        Template(tile_types={TileType.FOREST: -1})


@pytest.mark.parametrize("size", [6, 8, 1, 30])
def test_size_mismatch_is_incompatible(size: int):
    assert not Template.default(size).is_compatible_with_field(Field.empty(1))


def test_compatible_with_empty_field():
    assert Template.default(19).is_compatible_with_field(Field.empty(2))


def test_too_many_fixed_tiles_is_incompatible():
    template = Template.default(7)
    field = Field.empty(1)
    field = field.replace_tile((0, 0), Tile(position=(0, 0), type=TileType.DESERT))
    assert template.is_compatible_with_field(field)
    field = field.replace_tile((1, 0), Tile(position=(1, 0), type=TileType.DESERT))
    assert not template.is_compatible_with_field(field)


def test_too_many_fixed_tokens_is_incompatible():
    template = Template.default(7)
    field = Field.empty(1)
    for pos, tt in [((0, 0), TileType.SHEEP), ((1, 0), TileType.CLAY)]:
        field = field.replace_tile(pos, Tile(position=pos, type=tt, token=Token.TWO))
    assert not template.is_compatible_with_field(field)


def test_fixed_type_missing_from_template_is_incompatible():
    template = Template(tile_types={TileType.FOREST: 1}, tokens={Token.TWO: 1})
    field = Field.from_tiles([Tile(position=(0, 0), type=TileType.WATER)])
    assert not template.is_compatible_with_field(field)


def test_unset_types_and_tokens():
    template = Template.default(7)
    field = Field.empty(1)
    assert template.get_unset_types(field) == [TileType.DESERT] + list(RESOURCE_TYPES)
    field = field.replace_tile((0, 0), Tile(position=(0, 0), type=TileType.DESERT))
    field = field.replace_tile(
        (1, 0), Tile(position=(1, 0), type=TileType.GOLD, token=Token.TWO)
    )
    unset_types = template.get_unset_types(field)
    assert TileType.DESERT not in unset_types
    assert TileType.GOLD not in unset_types
    assert TileType.SHEEP in unset_types
    unset_tokens = template.get_unset_tokens(field)
    assert Token.TWO not in unset_tokens
    assert Token.THREE in unset_tokens


def test_unset_requires_compatible_field():
    template = Template.default(19)
    with pytest.raises(IncompatibleTemplateError):
        template.get_unset_types(Field.empty(1))
    with pytest.raises(IncompatibleTemplateError):
        template.get_unset_tokens(Field.empty(1))


def test_count_edits_return_new_template():
    template = Template.empty()
    edited = template.with_type_count(TileType.SHEEP, 3).with_token_count(Token.SIX, 2)
    assert template.size == 0
    assert edited.type_count(TileType.SHEEP) == 3
    assert edited.token_count(Token.SIX) == 2
    assert edited.resource_slot_count == 3
    with pytest.raises(ValidationError):
        template.with_type_count(TileType.SHEEP, -1)


def test_base_game_preset():
    assert base_game.name == "base_game"
    template = base_game.to_template()
    assert template.size == 19
    assert template.resource_slot_count == template.token_total == 18
    assert template.is_compatible_with_field(Field.empty(base_game.radius))


def test_preset_size_must_match_radius():
    with pytest.raises(ValidationError):
        TemplatePreset(name="bad", radius=1, tile_types={TileType.DESERT: 3})

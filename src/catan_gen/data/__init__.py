"""Set up the data."""

from pathlib import Path

from pydantic_yaml import parse_yaml_file_as

from .template import TemplatePreset

__all__ = ["data_path", "templates_path", "base_game", "load_template_preset"]

data_path = Path(__file__).parent
templates_path = data_path / "templates"


def load_template_preset(path: Path) -> TemplatePreset:
    """Load a template preset from a YAML file."""
    return parse_yaml_file_as(TemplatePreset, path)


base_game = load_template_preset(templates_path / "base_game.yaml")

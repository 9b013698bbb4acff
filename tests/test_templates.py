"""Tests for the style template table."""

import json

import pytest

from style_adder.errors import TemplateNotFoundError
from style_adder.templates import (
    DEFAULT_PREVIEW_IMAGE,
    FACE_CONSISTENCY_PREFIX,
    STYLE_TEMPLATES,
    build_template_table,
    get_template,
    load_templates_file,
)


def test_builtin_supercar_template():
    template = get_template("with_supercar")
    assert template.key == "with_supercar"
    assert template.prompt.startswith(FACE_CONSISTENCY_PREFIX)
    assert "Lamborghini Aventador SVJ" in template.prompt
    assert template.preview_image == DEFAULT_PREVIEW_IMAGE


def test_unknown_template_names_the_key():
    with pytest.raises(TemplateNotFoundError) as excinfo:
        get_template("with_spaceship")
    assert excinfo.value.key == "with_spaceship"
    assert "with_spaceship" in str(excinfo.value)


def test_templates_file_extends_and_overrides(tmp_path):
    path = tmp_path / "templates.json"
    path.write_text(json.dumps({
        "templates": [
            {"key": "with_spaceship", "prompt": "In orbit.", "preview_image": "https://example.com/ref.jpg"},
            {"key": "with_supercar", "prompt": "Override."},
            {"key": "", "prompt": "ignored"},
            {"prompt": "no key"},
        ]
    }), encoding="utf-8")

    table = build_template_table(path)

    assert table["with_spaceship"].prompt == "In orbit."
    assert table["with_spaceship"].preview_image == "https://example.com/ref.jpg"
    assert table["with_supercar"].prompt == "Override."
    assert table["with_supercar"].preview_image == DEFAULT_PREVIEW_IMAGE
    assert "" not in table
    # built-in table is untouched
    assert STYLE_TEMPLATES["with_supercar"].prompt != "Override."


def test_missing_or_invalid_templates_file_yields_nothing(tmp_path):
    assert load_templates_file(tmp_path / "absent.json") == {}
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    assert load_templates_file(bad) == {}
    assert build_template_table(bad) == STYLE_TEMPLATES


def test_build_template_table_without_file():
    assert build_template_table(None) == STYLE_TEMPLATES

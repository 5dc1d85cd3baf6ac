# tests/core/test_options.py
from __future__ import annotations

import json

import pytest

from drupal.jsonapi.core.config import Settings
from drupal.jsonapi.core.options import (
    DEFAULT_RELATIONSHIP_TESTS,
    EntityOptions,
    ResolverOptions,
    load_resolver_options,
)


def test_defaults():
    options = ResolverOptions()

    assert options.alias_prefix == ""
    assert options.strict is False
    assert options.max_attempts == 20
    assert options.entity.transform is True
    assert options.entity.relationship_tests == DEFAULT_RELATIONSHIP_TESTS


def test_loads_hooks_from_yaml(tmp_path, monkeypatch):
    monkeypatch.setenv("SERIALIZER", "json:dumps")
    (tmp_path / "hooks.yaml").write_text(
        "transformers:\n"
        "  article: ${SERIALIZER}\n"
        "value_processors:\n"
        "  field_body: json:loads\n"
        "relationship_tests:\n"
        "  - '^field_'\n"
        "  - '^uid$'\n"
        "transform: false\n"
    )

    options = load_resolver_options([str(tmp_path / "*.yaml")])

    assert options.transformers == {"article": json.dumps}
    assert options.entity.value_processors == {"field_body": json.loads}
    assert [p.pattern for p in options.entity.relationship_tests] == ["^field_", "^uid$"]
    assert options.entity.transform is False


def test_later_files_override_earlier(tmp_path):
    (tmp_path / "10-base.yaml").write_text("transformers:\n  page: json:dumps\n  article: json:dumps\n")
    (tmp_path / "20-site.yaml").write_text("transformers:\n  page: json:loads\n")

    options = load_resolver_options([str(tmp_path / "*.yaml")])

    assert options.transformers == {"page": json.loads, "article": json.dumps}


def test_invalid_pattern(tmp_path):
    (tmp_path / "hooks.yaml").write_text("relationship_tests:\n  - '^(field_'\n")

    with pytest.raises(ValueError, match="Invalid relationship test pattern"):
        load_resolver_options([str(tmp_path / "hooks.yaml")])


def test_settings_are_mapped(tmp_path):
    settings = Settings(
        alias_prefix="/de",
        strict_generation=True,
        static=True,
        max_attempts=3,
    )

    options = load_resolver_options([str(tmp_path / "none.yaml")], settings=settings)

    assert options.alias_prefix == "/de"
    assert options.strict is True
    assert options.static is True
    assert options.max_attempts == 3
    assert options.entity == EntityOptions()


@pytest.mark.parametrize("raw, expected", [("false", False), ("True", True), ("0", False)])
def test_transform_from_env(tmp_path, monkeypatch, raw, expected):
    monkeypatch.setenv("CLEAN_PAYLOADS", raw)
    (tmp_path / "hooks.yaml").write_text("transform: ${CLEAN_PAYLOADS}\n")

    options = load_resolver_options([str(tmp_path / "hooks.yaml")])

    assert options.entity.transform is expected

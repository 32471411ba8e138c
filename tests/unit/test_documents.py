"""Unit tests for definition documents and definition files."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from workflow_engine.engine.definition_store import DefinitionStore
from workflow_engine.engine.documents import (
    DefinitionDocument,
    discover_definition_files,
    load_definition_file,
    parse_definition_documents,
    seed_definitions,
)
from workflow_engine.engine.errors import InvalidDefinitionError


def test_document_maps_to_domain(definition_payload) -> None:
    definition = DefinitionDocument.model_validate(definition_payload()).to_domain()

    assert definition.id == "doc-review"
    assert definition.initial_state.id == "draft"
    assert definition.state("approved").is_final
    assert definition.action("approve").from_states == frozenset({"in-review"})
    assert definition.action("approve").to_state == "approved"


def test_document_defaults_and_inert_flags() -> None:
    doc = DefinitionDocument.model_validate(
        {
            "id": "wf",
            "states": [{"id": "a", "isInitial": True, "enabled": False}],
            "actions": [{"id": "x", "fromStates": ["a"], "toState": "a", "owner": "ignored"}],
        }
    )
    definition = doc.to_domain()

    assert definition.state("a").enabled is False
    assert definition.state("a").is_final is False
    assert definition.action("x").enabled is True


def test_from_domain_sorts_source_states(definition_factory) -> None:
    definition = definition_factory()
    doc = DefinitionDocument.from_domain(definition)

    assert doc.id == "doc-review"
    assert [s.id for s in doc.states] == ["draft", "in-review", "approved", "rejected"]
    assert doc.states[0].isInitial is True
    assert doc.actions[0].fromStates == ["draft"]


def test_parse_accepts_object_or_list(definition_payload) -> None:
    assert len(parse_definition_documents(definition_payload())) == 1
    assert len(parse_definition_documents([definition_payload("a"), definition_payload("b")])) == 2


def test_parse_rejects_wrong_shape() -> None:
    with pytest.raises(ValidationError):
        parse_definition_documents({"states": []})
    with pytest.raises(ValidationError):
        parse_definition_documents("doc-review")


def test_discover_definition_files(tmp_path: Path) -> None:
    (tmp_path / "b.json").write_text("{}", encoding="utf-8")
    (tmp_path / "a.json").write_text("{}", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("", encoding="utf-8")

    assert discover_definition_files(tmp_path) == [tmp_path / "a.json", tmp_path / "b.json"]
    assert discover_definition_files(tmp_path / "a.json") == [tmp_path / "a.json"]
    with pytest.raises(FileNotFoundError):
        discover_definition_files(tmp_path / "missing.json")


def test_seed_definitions_from_directory(tmp_path: Path, definition_payload) -> None:
    (tmp_path / "one.json").write_text(json.dumps(definition_payload("one")), encoding="utf-8")
    (tmp_path / "more.json").write_text(
        json.dumps([definition_payload("two"), definition_payload("three")]), encoding="utf-8"
    )
    store = DefinitionStore()

    created = seed_definitions(store, tmp_path)

    assert [d.id for d in created] == ["two", "three", "one"]
    assert len(store) == 3


def test_seed_definitions_fails_fast_on_invalid(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"id": "bad", "states": [{"id": "a"}]}), encoding="utf-8")

    with pytest.raises(InvalidDefinitionError):
        seed_definitions(DefinitionStore(), path)


def test_load_definition_file(tmp_path: Path, definition_payload) -> None:
    path = tmp_path / "wf.json"
    path.write_text(json.dumps(definition_payload()), encoding="utf-8")

    docs = load_definition_file(path)
    assert [d.id for d in docs] == ["doc-review"]

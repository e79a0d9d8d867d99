from __future__ import annotations

import dataclasses
import sys
import threading
import typing
from collections.abc import Mapping
from pathlib import Path

import pytest

PROJECT_BASE = Path(__file__).resolve().parents[1]
if str(PROJECT_BASE) not in sys.path:
    sys.path.insert(0, str(PROJECT_BASE))

import hackstead.catalog as catalog
from hackstead.catalog import ConfigLoadError, load_config, shared_config
from hackstead.config import HacksteadSettings, resolve_config_dir
from hackstead.models import ModelValidationError, UnknownArchetypeName
from hackstead.models._validation import _matches_type
from hackstead.models.archetypes import GotchiArchetype, KeepsakeArchetype
from hackstead.models.recipes import Recipe


def test_load_config_from_json_documents(corpus_dir: Path) -> None:
    config = load_config(corpus_dir)

    assert config.special_users == ("U0001",)
    assert config.is_special_user("U0001")
    assert not config.is_special_user("U9999")
    assert [a.name for a in config.possession_archetypes] == [
        "Adorpheus",
        "Bread Seed",
        "Bread",
        "Toast",
    ]
    assert config.find_possession("Adorpheus").kind == GotchiArchetype(base_happiness=1)
    assert config.find_possession("Bread").kind == KeepsakeArchetype()
    assert config.find_possession_handle("Toast") == 3


def test_loaded_sums_resolve_against_the_registry(corpus_dir: Path) -> None:
    config = load_config(corpus_dir)
    plant = config.find_plant("Bread Plant")

    assert config.hackstead_advancements.sum(150).land == 5
    assert config.hackstead_advancements.max().land == 15
    assert plant.advancements.sum(60).xp_multiplier == pytest.approx(2.0)
    assert plant.advancements.max().recipes == (Recipe(needs=((2, 2),), makes=3),)


def test_plant_for_seed(corpus_dir: Path) -> None:
    config = load_config(corpus_dir)

    seed = config.find_possession("Bread Seed")

    assert config.plant_for_seed(seed).name == "Bread Plant"
    with pytest.raises(ValueError):
        config.plant_for_seed(config.find_possession("Bread"))
    with pytest.raises(UnknownArchetypeName):
        config.find_plant("Toast Plant")


def test_config_is_immutable(corpus_dir: Path) -> None:
    config = load_config(corpus_dir)

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.special_users = ()  # type: ignore[misc]
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.hackstead_advancements.base.xp = 10  # type: ignore[misc]
    assert isinstance(config.hackstead_advancements.rest, tuple)


def test_toml_document_takes_precedence(corpus_dir: Path) -> None:
    (corpus_dir / "special_users.toml").write_text(
        'special_users = ["T1", "T2"]\n', encoding="utf-8"
    )

    config = load_config(corpus_dir)

    assert config.special_users == ("T1", "T2")


def test_missing_document_names_the_document(corpus_dir: Path) -> None:
    (corpus_dir / "plant_archetypes.json").unlink()

    with pytest.raises(ConfigLoadError) as excinfo:
        load_config(corpus_dir)

    assert excinfo.value.document == "plant_archetypes"
    assert "plant_archetypes.json" in str(excinfo.value)


def test_unparseable_document_names_the_document(corpus_dir: Path) -> None:
    (corpus_dir / "possession_archetypes.json").write_text("[{", encoding="utf-8")

    with pytest.raises(ConfigLoadError) as excinfo:
        load_config(corpus_dir)

    assert excinfo.value.document == "possession_archetypes"
    assert "parsing failed" in str(excinfo.value)


def test_undecodable_json_document_names_the_document(corpus_dir: Path) -> None:
    (corpus_dir / "special_users.json").write_bytes(b'["\xff"]')

    with pytest.raises(ConfigLoadError) as excinfo:
        load_config(corpus_dir)

    assert excinfo.value.document == "special_users"
    assert "parsing failed" in str(excinfo.value)


def test_undecodable_toml_document_names_the_document(corpus_dir: Path) -> None:
    (corpus_dir / "special_users.toml").write_bytes(b'special_users = ["\xff\xfe"]\n')

    with pytest.raises(ConfigLoadError) as excinfo:
        load_config(corpus_dir)

    assert excinfo.value.document == "special_users"
    assert "parsing failed" in str(excinfo.value)


def test_corpus_of_plain_nested_mappings_loads(corpus_dir: Path) -> None:
    # The JSON documents decode to nothing but dicts, lists and scalars.
    config = load_config(corpus_dir)

    assert len(config.hackstead_advancements.rest) == 2
    assert config.find_plant("Bread Plant").advancements.base.title == "Loaf"
    assert _matches_type({"base": {}}, typing.Mapping)
    assert _matches_type({"base": {}}, Mapping)
    assert not _matches_type([("base", {})], typing.Mapping)


def test_toml_without_document_key_is_rejected(corpus_dir: Path) -> None:
    (corpus_dir / "special_users.toml").write_text('users = ["T1"]\n', encoding="utf-8")

    with pytest.raises(ConfigLoadError) as excinfo:
        load_config(corpus_dir)

    assert excinfo.value.document == "special_users"


def test_malformed_payload_is_fatal(make_corpus_dir) -> None:
    def _edit(corpus):
        corpus["hackstead_advancements"]["rest"][0]["xp"] = "lots"

    directory = make_corpus_dir(_edit)

    with pytest.raises(ConfigLoadError) as excinfo:
        load_config(directory)

    assert excinfo.value.document == "hackstead_advancements"
    assert isinstance(excinfo.value.__cause__, ModelValidationError)


def test_special_users_must_be_strings(make_corpus_dir) -> None:
    def _edit(corpus):
        corpus["special_users"] = ["U1", 2]

    with pytest.raises(ConfigLoadError) as excinfo:
        load_config(make_corpus_dir(_edit))

    assert excinfo.value.document == "special_users"


def test_dangling_names_load_but_fail_when_summed(make_corpus_dir) -> None:
    def _edit(corpus):
        recipe = corpus["plant_archetypes"][0]["advancements"]["rest"][1]["kind"]["Craft"]
        recipe["recipes"][0]["makes"] = "Croissant"

    config = load_config(make_corpus_dir(_edit))
    advancements = config.find_plant("Bread Plant").advancements

    assert advancements.sum(60).xp_multiplier == pytest.approx(2.0)
    with pytest.raises(UnknownArchetypeName):
        advancements.max()


def test_shared_config_is_built_once(
    corpus_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("HACKSTEAD_CONFIG_DIR", str(corpus_dir))
    calls = []
    real_load = catalog.load_config

    def _counting_load(directory=None):
        calls.append(directory)
        return real_load(directory)

    monkeypatch.setattr(catalog, "load_config", _counting_load)

    results = []
    threads = [
        threading.Thread(target=lambda: results.append(shared_config())) for _ in range(8)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(calls) == 1
    assert len(results) == 8
    assert all(result is results[0] for result in results)
    assert shared_config() is results[0]


def test_resolve_config_dir_prefers_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    override = tmp_path / "custom"
    monkeypatch.setenv("HACKSTEAD_CONFIG_DIR", str(override))

    assert resolve_config_dir(Path("/ignored/base")) == override.resolve()


def test_resolve_config_dir_defaults_to_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("HACKSTEAD_CONFIG_DIR", raising=False)

    assert resolve_config_dir(tmp_path) == (tmp_path / "config").resolve()


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HACKSTEAD_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("HACKSTEAD_LOG_LEVEL", "debug")
    monkeypatch.setenv("HACKSTEAD_STRICT", "yes")

    settings = HacksteadSettings.from_env()

    assert settings.config_dir == tmp_path.resolve()
    assert settings.log_level == 10
    assert settings.strict is True

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable

import pytest

PROJECT_BASE = Path(__file__).resolve().parents[1]
if str(PROJECT_BASE) not in sys.path:
    sys.path.insert(0, str(PROJECT_BASE))

from hackstead.catalog import reset_shared_config


def _tier(kind: dict[str, Any], xp: int, title: str) -> dict[str, Any]:
    return {
        "kind": kind,
        "xp": xp,
        "title": title,
        "description": f"{title} description",
        "achiever_title": f"{title} achiever",
    }


def sample_corpus() -> dict[str, Any]:
    """A small, fully consistent corpus in its JSON document form."""

    return {
        "special_users": ["U0001"],
        "hackstead_advancements": {
            "base": _tier({"Land": {"pieces": 0}}, 0, "Start"),
            "rest": [
                _tier({"Land": {"pieces": 5}}, 100, "Plot"),
                _tier({"Land": {"pieces": 10}}, 500, "Field"),
            ],
        },
        "plant_archetypes": [
            {
                "name": "Bread Plant",
                "advancements": {
                    "base": _tier({"Yield": {"resources": [[1.0, "Bread"]]}}, 0, "Loaf"),
                    "rest": [
                        _tier({"Xp": {"multiplier": 2.0}}, 50, "Rise"),
                        _tier(
                            {
                                "Craft": {
                                    "recipes": [{"needs": [[2, "Bread"]], "makes": "Toast"}]
                                }
                            },
                            200,
                            "Toaster",
                        ),
                    ],
                },
            }
        ],
        "possession_archetypes": [
            {"name": "Adorpheus", "kind": {"Gotchi": {"base_happiness": 1}}},
            {"name": "Bread Seed", "kind": {"Seed": {"grows_into": "Bread Plant"}}},
            {"name": "Bread", "kind": {"Keepsake": None}},
            {"name": "Toast", "kind": {"Keepsake": {}}},
        ],
    }


def write_corpus(directory: Path, corpus: dict[str, Any]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name, value in corpus.items():
        (directory / f"{name}.json").write_text(json.dumps(value), encoding="utf-8")
    return directory


@pytest.fixture
def corpus_dir(tmp_path: Path) -> Path:
    return write_corpus(tmp_path / "config", sample_corpus())


@pytest.fixture
def make_corpus_dir(tmp_path: Path) -> Callable[[Callable[[dict[str, Any]], None]], Path]:
    """Write the sample corpus after letting the test edit it."""

    def _make(edit: Callable[[dict[str, Any]], None]) -> Path:
        corpus = sample_corpus()
        edit(corpus)
        return write_corpus(tmp_path / "edited", corpus)

    return _make


@pytest.fixture(autouse=True)
def _fresh_shared_config():
    reset_shared_config()
    yield
    reset_shared_config()

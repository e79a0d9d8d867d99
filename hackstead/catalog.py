"""Loading of the balance documents into one immutable :class:`Config`.

Four documents make up a corpus. Each lives in the configuration directory
as ``<name>.toml`` (the value stored under a top-level ``<name>`` key) or as
``<name>.json`` (the bare value). Every failure while reading or parsing a
document raises :class:`ConfigLoadError`; there is no partially loaded
corpus.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Sequence, TypeVar

import tomllib

from .config import resolve_config_dir
from .models._validation import ModelValidationError, load_dataclass
from .models.advancements import (
    HacksteadAdvancementSet,
    HacksteadAggregator,
    load_advancement_set,
    parse_hackstead_kind,
)
from .models.archetypes import (
    Archetype,
    ArchetypeHandle,
    ArchetypeRegistry,
    SeedArchetype,
    UnknownArchetypeName,
)
from .models.plants import PlantArchetype, load_plant_archetype

log = logging.getLogger(__name__)

T = TypeVar("T")

DOCUMENT_NAMES: tuple[str, ...] = (
    "special_users",
    "hackstead_advancements",
    "plant_archetypes",
    "possession_archetypes",
)


class ConfigLoadError(RuntimeError):
    """Raised when a balance document cannot be read or understood."""

    def __init__(self, document: str, cause: object) -> None:
        self.document = document
        self.cause = cause
        super().__init__(f"{document}: {cause}")


@dataclass(frozen=True, slots=True)
class Config:
    """Every loaded balance document, shared read-only once built."""

    special_users: tuple[str, ...]
    hackstead_advancements: HacksteadAdvancementSet
    plant_archetypes: tuple[PlantArchetype, ...]
    possession_archetypes: ArchetypeRegistry

    def find_plant(self, name: str) -> PlantArchetype:
        for plant in self.plant_archetypes:
            if plant.name == name:
                return plant
        raise UnknownArchetypeName(name)

    def find_possession(self, name: str) -> Archetype:
        return self.possession_archetypes.find_by_name(name)

    def find_possession_handle(self, name: str) -> ArchetypeHandle:
        return self.possession_archetypes.find_handle_by_name(name)

    def plant_for_seed(self, archetype: Archetype) -> PlantArchetype:
        if not isinstance(archetype.kind, SeedArchetype):
            raise ValueError(f"{archetype.name!r} is not a seed")
        return self.find_plant(archetype.kind.grows_into)

    def is_special_user(self, user: str) -> bool:
        return user in self.special_users


def _read_document(directory: Path, name: str) -> Any:
    toml_path = directory / f"{name}.toml"
    json_path = directory / f"{name}.json"
    try:
        if toml_path.is_file():
            with toml_path.open("rb") as handle:
                payload = tomllib.load(handle)
            if name not in payload:
                raise ConfigLoadError(
                    name, f"{toml_path} has no top-level {name!r} entry"
                )
            return payload[name]
        with json_path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as exc:
        raise ConfigLoadError(
            name, f"no {toml_path.name} or {json_path.name} in {directory}"
        ) from exc
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigLoadError(name, f"parsing failed: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(name, f"opening failed: {exc}") from exc


def _expect_list(name: str, value: Any) -> Sequence[Any]:
    if not isinstance(value, list):
        raise ConfigLoadError(name, f"expected a list, received {type(value).__name__}")
    return value


def _parse_special_users(value: Any) -> tuple[str, ...]:
    entries = _expect_list("special_users", value)
    if not all(isinstance(entry, str) for entry in entries):
        raise ConfigLoadError("special_users", "every entry must be a string")
    return tuple(entries)


def _parse_possessions(value: Any) -> ArchetypeRegistry:
    entries = _expect_list("possession_archetypes", value)
    return ArchetypeRegistry([load_dataclass(Archetype, entry) for entry in entries])


def _parse_plants(value: Any, registry: ArchetypeRegistry) -> tuple[PlantArchetype, ...]:
    entries = _expect_list("plant_archetypes", value)
    return tuple(load_plant_archetype(entry, registry) for entry in entries)


def load_config(directory: Path | str | None = None) -> Config:
    """Read and build a corpus from ``directory``.

    Defaults to :func:`~hackstead.config.resolve_config_dir`.
    """

    base = Path(directory) if directory is not None else resolve_config_dir()
    raw = {name: _read_document(base, name) for name in DOCUMENT_NAMES}

    def _build(name: str, builder: Callable[..., T], *args: Any) -> T:
        try:
            return builder(raw[name], *args)
        except ModelValidationError as exc:
            log.error("Failed to load %s from %s: %s", name, base, "; ".join(exc.errors) or exc)
            raise ConfigLoadError(name, exc) from exc

    special_users = _build("special_users", _parse_special_users)
    registry = _build("possession_archetypes", _parse_possessions)
    hackstead = _build(
        "hackstead_advancements",
        load_advancement_set,
        parse_hackstead_kind,
        HacksteadAggregator(),
    )
    plants = _build("plant_archetypes", _parse_plants, registry)

    log.info(
        "Loaded corpus from %s: %d possession archetype(s), %d plant(s), "
        "%d hackstead tier(s), %d special user(s)",
        base,
        len(registry),
        len(plants),
        len(hackstead.all()),
        len(special_users),
    )
    return Config(
        special_users=special_users,
        hackstead_advancements=hackstead,
        plant_archetypes=plants,
        possession_archetypes=registry,
    )


_SHARED_LOCK = threading.Lock()
_SHARED: Config | None = None


def shared_config() -> Config:
    """Return the process-wide corpus, building it on first use.

    Construction happens once no matter how many threads ask first.
    """

    global _SHARED
    config = _SHARED
    if config is not None:
        return config
    with _SHARED_LOCK:
        if _SHARED is None:
            _SHARED = load_config()
        return _SHARED


def reset_shared_config() -> None:
    global _SHARED
    with _SHARED_LOCK:
        _SHARED = None


__all__ = [
    "Config",
    "ConfigLoadError",
    "DOCUMENT_NAMES",
    "load_config",
    "reset_shared_config",
    "shared_config",
]

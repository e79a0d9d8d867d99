"""Plant archetypes and the bonuses their advancements grant."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Sequence, Union

from ._validation import (
    FieldSpec,
    ModelValidationError,
    ModelValidator,
    PairSpec,
    SequenceSpec,
    is_non_empty_str,
    load_dataclass,
    split_tagged,
)
from .advancements import (
    Advancement,
    AdvancementSet,
    load_advancement_set,
)
from .archetypes import ArchetypeHandle, ArchetypeRegistry
from .recipes import Recipe, RecipeSpec, resolve_recipe


@dataclass(frozen=True, slots=True)
class Xp:
    multiplier: float


@dataclass(frozen=True, slots=True)
class YieldSpeed:
    multiplier: float


@dataclass(frozen=True, slots=True)
class YieldNeighboringSize:
    multiplier: float


@dataclass(frozen=True, slots=True)
class Yield:
    resources: tuple[tuple[float, str], ...]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Yield":
        return cls(
            resources=tuple(
                (float(amount), str(name)) for amount, name in data["resources"]
            )
        )


@dataclass(frozen=True, slots=True)
class Craft:
    recipes: tuple[RecipeSpec, ...]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Craft":
        return cls(
            recipes=tuple(load_dataclass(RecipeSpec, raw) for raw in data["recipes"])
        )


PlantAdvancementKind = Union[Xp, YieldSpeed, YieldNeighboringSize, Yield, Craft]


class _MultiplierValidator(ModelValidator):
    fields = {
        "multiplier": FieldSpec(float, "a numeric multiplier"),
    }


class XpValidator(_MultiplierValidator):
    model = Xp


class YieldSpeedValidator(_MultiplierValidator):
    model = YieldSpeed


class YieldNeighboringSizeValidator(_MultiplierValidator):
    model = YieldNeighboringSize


class YieldValidator(ModelValidator):
    model = Yield
    fields = {
        "resources": FieldSpec(
            SequenceSpec(PairSpec(float, is_non_empty_str)),
            "a list of [amount, archetype name] pairs",
        ),
    }


class CraftValidator(ModelValidator):
    model = Craft
    fields = {
        "recipes": FieldSpec(SequenceSpec(Mapping), "a list of recipes"),
    }


Xp.validator = XpValidator
YieldSpeed.validator = YieldSpeedValidator
YieldNeighboringSize.validator = YieldNeighboringSizeValidator
Yield.validator = YieldValidator
Craft.validator = CraftValidator


_PLANT_KINDS: Mapping[str, type] = {
    "Xp": Xp,
    "YieldSpeed": YieldSpeed,
    "YieldNeighboringSize": YieldNeighboringSize,
    "Yield": Yield,
    "Craft": Craft,
}


def parse_plant_kind(value: Any) -> PlantAdvancementKind:
    tag, body = split_tagged(Advancement, value)
    kind = _PLANT_KINDS.get(tag)
    if kind is None:
        raise ModelValidationError(Advancement, [f"Unknown plant advancement kind '{tag}'"])
    if kind in (Xp, YieldSpeed, YieldNeighboringSize):
        payload = kind.validator.validate(body)
        return kind(multiplier=float(payload["multiplier"]))
    return load_dataclass(kind, body)


@dataclass(frozen=True, slots=True)
class PlantSum:
    xp_multiplier: float = 1.0
    yield_speed_multiplier: float = 1.0
    yields: tuple[tuple[float, ArchetypeHandle], ...] = ()
    recipes: tuple[Recipe, ...] = ()


class PlantAggregator:
    """Folds plant tiers, resolving archetype names against ``registry``.

    Unknown names raise :class:`UnknownArchetypeName` out of :meth:`new`.
    """

    __slots__ = ("registry",)

    def __init__(self, registry: ArchetypeRegistry) -> None:
        self.registry = registry

    def identity(self) -> PlantSum:
        return PlantSum()

    def new(self, unlocked: Sequence[Advancement[PlantAdvancementKind]]) -> PlantSum:
        resolve = self.registry.find_handle_by_name
        xp_multiplier = 1.0
        yield_speed_multiplier = 1.0
        yields: list[tuple[float, ArchetypeHandle]] = []
        recipes: list[Recipe] = []

        for tier in unlocked:
            kind = tier.kind
            if isinstance(kind, Xp):
                xp_multiplier *= kind.multiplier
            elif isinstance(kind, YieldSpeed):
                yield_speed_multiplier *= kind.multiplier
            elif isinstance(kind, YieldNeighboringSize):
                # Applied by the garden layout, not part of a single plant's sum.
                continue
            elif isinstance(kind, Yield):
                yields.extend((amount, resolve(name)) for amount, name in kind.resources)
            elif isinstance(kind, Craft):
                recipes.extend(resolve_recipe(spec, resolve) for spec in kind.recipes)

        return PlantSum(
            xp_multiplier=xp_multiplier,
            yield_speed_multiplier=yield_speed_multiplier,
            yields=tuple(yields),
            recipes=tuple(recipes),
        )


PlantAdvancementSet = AdvancementSet[PlantAdvancementKind, PlantSum]


@dataclass(frozen=True, slots=True)
class PlantArchetype:
    """A growable plant whose bonuses unlock with plant experience."""

    name: str
    advancements: PlantAdvancementSet

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], aggregator: PlantAggregator
    ) -> "PlantArchetype":
        return cls(
            name=data["name"],
            advancements=load_advancement_set(
                data["advancements"], parse_plant_kind, aggregator
            ),
        )


class PlantArchetypeValidator(ModelValidator):
    model = PlantArchetype
    fields = {
        "name": FieldSpec(is_non_empty_str, "a non-empty plant name"),
        "advancements": FieldSpec(Mapping, "an advancement set"),
    }


PlantArchetype.validator = PlantArchetypeValidator


def load_plant_archetype(data: Any, registry: ArchetypeRegistry) -> PlantArchetype:
    payload = PlantArchetypeValidator.validate(data)
    return PlantArchetype.from_dict(payload, PlantAggregator(registry))


__all__ = [
    "Craft",
    "PlantAdvancementKind",
    "PlantAdvancementSet",
    "PlantAggregator",
    "PlantArchetype",
    "PlantSum",
    "Xp",
    "Yield",
    "YieldNeighboringSize",
    "YieldSpeed",
    "load_plant_archetype",
    "parse_plant_kind",
]

"""Domain models for the balance documents."""

from ._validation import ModelValidationError, load_dataclass, validate_dataclass_payload
from .advancements import (
    Advancement,
    AdvancementSet,
    HacksteadAggregator,
    HacksteadSum,
    Land,
)
from .archetypes import (
    Archetype,
    ArchetypeHandle,
    ArchetypeRegistry,
    GotchiArchetype,
    KeepsakeArchetype,
    SeedArchetype,
    UnknownArchetypeName,
)
from .plants import (
    Craft,
    PlantAggregator,
    PlantArchetype,
    PlantSum,
    Xp,
    Yield,
    YieldNeighboringSize,
    YieldSpeed,
)
from .recipes import Recipe, RecipeSpec, resolve_recipe

__all__ = [
    "Advancement",
    "AdvancementSet",
    "Archetype",
    "ArchetypeHandle",
    "ArchetypeRegistry",
    "Craft",
    "GotchiArchetype",
    "HacksteadAggregator",
    "HacksteadSum",
    "KeepsakeArchetype",
    "Land",
    "ModelValidationError",
    "PlantAggregator",
    "PlantArchetype",
    "PlantSum",
    "Recipe",
    "RecipeSpec",
    "SeedArchetype",
    "UnknownArchetypeName",
    "Xp",
    "Yield",
    "YieldNeighboringSize",
    "YieldSpeed",
    "load_dataclass",
    "resolve_recipe",
    "validate_dataclass_payload",
]

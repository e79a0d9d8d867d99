"""Crafting recipes in their authored and resolved forms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from ._validation import (
    FieldSpec,
    ModelValidator,
    PairSpec,
    SequenceSpec,
    is_non_empty_str,
)
from .archetypes import ArchetypeHandle

Quantity = float | int


@dataclass(frozen=True, slots=True)
class RecipeSpec:
    """A recipe as written in the documents, referring to archetypes by name."""

    needs: tuple[tuple[Quantity, str], ...]
    makes: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RecipeSpec":
        needs = tuple((quantity, str(name)) for quantity, name in data.get("needs", ()))
        return cls(needs=needs, makes=data["makes"])

    def names(self) -> tuple[str, ...]:
        return (self.makes, *(name for _, name in self.needs))


class RecipeSpecValidator(ModelValidator):
    model = RecipeSpec
    fields = {
        "needs": FieldSpec(
            SequenceSpec(PairSpec((int, float), is_non_empty_str)),
            "a list of [quantity, archetype name] pairs",
            required=False,
        ),
        "makes": FieldSpec(is_non_empty_str, "the name of the crafted archetype"),
    }


RecipeSpec.validator = RecipeSpecValidator


@dataclass(frozen=True, slots=True)
class Recipe:
    """A recipe whose ingredients and product are archetype handles."""

    needs: tuple[tuple[Quantity, ArchetypeHandle], ...]
    makes: ArchetypeHandle


def resolve_recipe(
    spec: RecipeSpec, resolve: Callable[[str], ArchetypeHandle]
) -> Recipe:
    """Turn a named recipe into a handle-based one.

    ``resolve`` raises for unknown names and the error is left to propagate.
    """

    makes = resolve(spec.makes)
    needs = tuple((quantity, resolve(name)) for quantity, name in spec.needs)
    return Recipe(needs=needs, makes=makes)


__all__ = ["Quantity", "Recipe", "RecipeSpec", "resolve_recipe"]

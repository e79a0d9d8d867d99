"""Possession archetypes and the handle registry built over them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Sequence, Union

from ._validation import (
    FieldSpec,
    ModelValidationError,
    ModelValidator,
    is_non_empty_str,
    is_tagged_mapping,
    is_unsigned_int,
    split_tagged,
)

# Index of an archetype in the authored ``possession_archetypes`` list. Only
# meaningful for the registry instance that handed it out.
ArchetypeHandle = int


class UnknownArchetypeName(LookupError):
    """Raised when a name does not match any known archetype."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"no archetype by the name of {name!r}")


@dataclass(frozen=True, slots=True)
class GotchiArchetype:
    base_happiness: int


@dataclass(frozen=True, slots=True)
class SeedArchetype:
    grows_into: str


@dataclass(frozen=True, slots=True)
class KeepsakeArchetype:
    pass


ArchetypeKind = Union[GotchiArchetype, SeedArchetype, KeepsakeArchetype]


def parse_archetype_kind(value: Any) -> ArchetypeKind:
    """Build an archetype kind from its tagged document form."""

    tag, body = split_tagged(Archetype, value)
    if tag == "Gotchi":
        happiness = body.get("base_happiness")
        if not is_unsigned_int(happiness):
            raise ModelValidationError(
                GotchiArchetype,
                ["Field 'base_happiness' expected a non-negative integer"],
            )
        return GotchiArchetype(base_happiness=happiness)
    if tag == "Seed":
        grows_into = body.get("grows_into")
        if not is_non_empty_str(grows_into):
            raise ModelValidationError(
                SeedArchetype,
                ["Field 'grows_into' expected a non-empty plant name"],
            )
        return SeedArchetype(grows_into=grows_into)
    if tag == "Keepsake":
        return KeepsakeArchetype()
    raise ModelValidationError(Archetype, [f"Unknown archetype kind '{tag}'"])


@dataclass(frozen=True, slots=True)
class Archetype:
    """One possession type players can own."""

    name: str
    kind: ArchetypeKind

    @property
    def is_seed(self) -> bool:
        return isinstance(self.kind, SeedArchetype)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Archetype":
        return cls(name=data["name"], kind=parse_archetype_kind(data["kind"]))


class ArchetypeValidator(ModelValidator):
    model = Archetype
    fields = {
        "name": FieldSpec(is_non_empty_str, "a non-empty archetype name"),
        "kind": FieldSpec(is_tagged_mapping, "a tagged archetype kind"),
    }


Archetype.validator = ArchetypeValidator


class ArchetypeRegistry:
    """Read-only lookup over archetypes in their authored order.

    Names are not required to be unique; the first occurrence wins.
    """

    __slots__ = ("_archetypes",)

    def __init__(self, archetypes: Sequence[Archetype]) -> None:
        self._archetypes: tuple[Archetype, ...] = tuple(archetypes)

    def __len__(self) -> int:
        return len(self._archetypes)

    def __iter__(self) -> Iterator[Archetype]:
        return iter(self._archetypes)

    def __contains__(self, name: object) -> bool:
        return any(name == archetype.name for archetype in self._archetypes)

    def __repr__(self) -> str:
        return f"ArchetypeRegistry({len(self._archetypes)} archetypes)"

    @property
    def archetypes(self) -> tuple[Archetype, ...]:
        return self._archetypes

    def find_by_name(self, name: str) -> Archetype:
        for archetype in self._archetypes:
            if archetype.name == name:
                return archetype
        raise UnknownArchetypeName(name)

    def find_handle_by_name(self, name: str) -> ArchetypeHandle:
        for handle, archetype in enumerate(self._archetypes):
            if archetype.name == name:
                return handle
        raise UnknownArchetypeName(name)

    def get(self, handle: ArchetypeHandle) -> Archetype:
        if not 0 <= handle < len(self._archetypes):
            raise IndexError(f"archetype handle {handle} is out of range")
        return self._archetypes[handle]


__all__ = [
    "Archetype",
    "ArchetypeHandle",
    "ArchetypeKind",
    "ArchetypeRegistry",
    "GotchiArchetype",
    "KeepsakeArchetype",
    "SeedArchetype",
    "UnknownArchetypeName",
    "parse_archetype_kind",
]

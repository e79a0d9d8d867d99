"""Experience gated advancement tiers and the player profile bonuses."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Protocol, Sequence, TypeVar

from ._validation import (
    FieldSpec,
    ModelValidationError,
    ModelValidator,
    SequenceSpec,
    is_tagged_mapping,
    is_unsigned_int,
    load_dataclass,
    split_tagged,
)

K = TypeVar("K")
S = TypeVar("S")
S_co = TypeVar("S_co", covariant=True)


@dataclass(frozen=True, slots=True)
class Advancement(Generic[K]):
    """One unlock threshold with its payload and display text."""

    kind: K
    xp: int
    title: str
    description: str = ""
    achiever_title: str = ""

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], parse_kind: Callable[[Any], K]
    ) -> "Advancement[K]":
        return cls(
            kind=parse_kind(data["kind"]),
            xp=data["xp"],
            title=data["title"],
            description=data["description"],
            achiever_title=data["achiever_title"],
        )


class AdvancementValidator(ModelValidator):
    model = Advancement
    fields = {
        "kind": FieldSpec(is_tagged_mapping, "a tagged advancement kind"),
        "xp": FieldSpec(is_unsigned_int, "a non-negative experience threshold"),
        "title": FieldSpec(str, "a display title"),
        "description": FieldSpec(str, "a description"),
        "achiever_title": FieldSpec(str, "a title granted on unlock"),
    }


Advancement.validator = AdvancementValidator


class SumAggregator(Protocol[S_co]):
    """Folds a slice of unlocked tiers into one bonus summary."""

    def identity(self) -> S_co:
        ...

    def new(self, unlocked: Sequence[Advancement[Any]]) -> S_co:
        ...


@dataclass(frozen=True, slots=True)
class AdvancementSet(Generic[K, S]):
    """A base tier plus further tiers, ascending by ``xp``.

    The ordering of ``rest`` is trusted rather than checked.
    """

    base: Advancement[K]
    rest: tuple[Advancement[K], ...]
    aggregator: SumAggregator[S] = field(repr=False, compare=False)

    def all(self) -> tuple[Advancement[K], ...]:
        return (self.base, *self.rest)

    def current_position(self, xp: int) -> int:
        """Index of the first tier in ``rest`` still locked at ``xp``.

        Once ``xp`` reaches every threshold there is no such tier and the
        position falls back to ``0``, the same as having no progress at all.
        """

        for position, advancement in enumerate(self.rest):
            if advancement.xp > xp:
                return position
        return 0

    def current(self, xp: int) -> Advancement[K]:
        for advancement in self.rest:
            if advancement.xp > xp:
                return advancement
        return self.base

    def next_threshold(self, xp: int) -> int | None:
        current = self.current(xp)
        if current is self.base:
            return None
        return current.xp

    def sum(self, xp: int) -> S:
        # Past the last threshold this is the empty slice, see current_position.
        return self.aggregator.new(self.rest[: self.current_position(xp)])

    def max(self) -> S:
        return self.aggregator.new(self.rest)

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        parse_kind: Callable[[Any], K],
        aggregator: SumAggregator[S],
    ) -> "AdvancementSet[K, S]":
        def _tier(raw: Any) -> Advancement[K]:
            payload = AdvancementValidator.validate(raw)
            return Advancement.from_dict(payload, parse_kind)

        return cls(
            base=_tier(data["base"]),
            rest=tuple(_tier(raw) for raw in data.get("rest", ())),
            aggregator=aggregator,
        )


class AdvancementSetValidator(ModelValidator):
    model = AdvancementSet
    fields = {
        "base": FieldSpec(Mapping, "the base advancement"),
        "rest": FieldSpec(
            SequenceSpec(Mapping),
            "a list of further advancements",
            required=False,
        ),
    }


def load_advancement_set(
    data: Any,
    parse_kind: Callable[[Any], K],
    aggregator: SumAggregator[S],
) -> AdvancementSet[K, S]:
    payload = AdvancementSetValidator.validate(data)
    return AdvancementSet.from_dict(payload, parse_kind, aggregator)


# ---------------------------------------------------------------------------
# Player profile ("hackstead") advancements
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Land:
    pieces: int


HacksteadAdvancementKind = Land


def parse_hackstead_kind(value: Any) -> HacksteadAdvancementKind:
    tag, body = split_tagged(Advancement, value)
    if tag != "Land":
        raise ModelValidationError(
            Advancement, [f"Unknown hackstead advancement kind '{tag}'"]
        )
    return load_dataclass(Land, body)


class LandValidator(ModelValidator):
    model = Land
    fields = {
        "pieces": FieldSpec(is_unsigned_int, "a non-negative number of land pieces"),
    }


Land.validator = LandValidator


@dataclass(frozen=True, slots=True)
class HacksteadSum:
    land: int = 0


class HacksteadAggregator:
    """Adds up the land granted by each unlocked tier."""

    def identity(self) -> HacksteadSum:
        return HacksteadSum()

    def new(self, unlocked: Sequence[Advancement[HacksteadAdvancementKind]]) -> HacksteadSum:
        land = sum(tier.kind.pieces for tier in unlocked if isinstance(tier.kind, Land))
        return HacksteadSum(land=land)


HacksteadAdvancementSet = AdvancementSet[HacksteadAdvancementKind, HacksteadSum]


__all__ = [
    "Advancement",
    "AdvancementSet",
    "HacksteadAdvancementKind",
    "HacksteadAdvancementSet",
    "HacksteadAggregator",
    "HacksteadSum",
    "Land",
    "SumAggregator",
    "load_advancement_set",
    "parse_hackstead_kind",
]

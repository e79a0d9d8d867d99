"""Cross-reference checks over a fully loaded corpus.

Names in the documents are typed by hand, so a misspelt seed target or
crafting ingredient is easy to introduce. :func:`validate_corpus` walks every
reference and reports each one that does not resolve.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Sequence

from .catalog import Config
from .models.archetypes import SeedArchetype
from .models.plants import Craft, Yield

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """A single dangling reference (or, with ``strict``, a duplicate name)."""

    level: str
    owner: str
    tier: str | None
    reference: str
    message: str

    def display(self) -> str:
        return f"[{self.level.upper()}] {self.message}"


class CorpusValidationError(ValueError):
    """Raised when a corpus contains references that do not resolve."""

    def __init__(self, issues: Sequence[ValidationIssue]) -> None:
        self.issues = list(issues)
        details = "; ".join(issue.message for issue in self.issues)
        super().__init__(f"{len(self.issues)} corpus issue(s): {details}")


def _error(owner: str, tier: str | None, reference: str, message: str) -> ValidationIssue:
    return ValidationIssue("error", owner, tier, reference, message)


def _check_seeds(config: Config, plant_names: set[str]) -> Iterable[ValidationIssue]:
    for archetype in config.possession_archetypes:
        kind = archetype.kind
        if isinstance(kind, SeedArchetype) and kind.grows_into not in plant_names:
            yield _error(
                archetype.name,
                None,
                kind.grows_into,
                f"seed archetype {archetype.name!r} claims it grows into unknown "
                f"plant archetype {kind.grows_into!r}",
            )


def _check_plants(config: Config, known: set[str]) -> Iterable[ValidationIssue]:
    for plant in config.plant_archetypes:
        for tier in plant.advancements.all():
            kind = tier.kind
            if isinstance(kind, Yield):
                for _, resource in kind.resources:
                    if resource not in known:
                        yield _error(
                            plant.name,
                            tier.title,
                            resource,
                            f"Yield advancement {tier.title!r} for plant {plant.name!r} "
                            f"includes unknown resource {resource!r}",
                        )
            elif isinstance(kind, Craft):
                for recipe in kind.recipes:
                    if recipe.makes not in known:
                        yield _error(
                            plant.name,
                            tier.title,
                            recipe.makes,
                            f"Crafting advancement {tier.title!r} for plant {plant.name!r} "
                            f"produces unknown resource {recipe.makes!r}",
                        )
                    for _, resource in recipe.needs:
                        if resource not in known:
                            yield _error(
                                plant.name,
                                tier.title,
                                resource,
                                f"Crafting advancement {tier.title!r} for plant "
                                f"{plant.name!r} uses unknown resource {resource!r} "
                                f"in recipe for {recipe.makes!r}",
                            )


def _check_duplicates(label: str, names: Iterable[str]) -> Iterable[ValidationIssue]:
    for name, count in Counter(names).items():
        if count > 1:
            yield ValidationIssue(
                "warning",
                name,
                None,
                name,
                f"{label} {name!r} is defined {count} times; lookups use the first",
            )


def validate_corpus(config: Config, *, strict: bool = False) -> list[ValidationIssue]:
    """Return every unresolved reference in ``config``.

    With ``strict`` duplicate names are reported too, as warnings.
    """

    known = {archetype.name for archetype in config.possession_archetypes}
    plant_names = {plant.name for plant in config.plant_archetypes}

    issues = list(_check_seeds(config, plant_names))
    issues.extend(_check_plants(config, known))
    if strict:
        issues.extend(
            _check_duplicates(
                "possession archetype",
                (archetype.name for archetype in config.possession_archetypes),
            )
        )
        issues.extend(
            _check_duplicates("plant archetype", (plant.name for plant in config.plant_archetypes))
        )

    error_count = sum(1 for issue in issues if issue.level == "error")
    if issues:
        log.warning(
            "Corpus check found %d error(s) and %d warning(s)",
            error_count,
            len(issues) - error_count,
        )
    else:
        log.info("Corpus check found no issues")
    return issues


def assert_corpus_valid(config: Config, *, strict: bool = False) -> None:
    errors = [
        issue for issue in validate_corpus(config, strict=strict) if issue.level == "error"
    ]
    if errors:
        raise CorpusValidationError(errors)


__all__ = [
    "CorpusValidationError",
    "ValidationIssue",
    "assert_corpus_valid",
    "validate_corpus",
]

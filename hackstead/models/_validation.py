"""Utilities for validating authored document payloads before instantiation."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from numbers import Real
from typing import Any, ClassVar, get_origin

# Largest value an unsigned 64-bit field (xp, happiness) may hold.
U64_MAX = 2**64 - 1


class ModelValidationError(ValueError):
    """Raised when a payload does not satisfy a model's requirements."""

    def __init__(self, model: type[Any], errors: Sequence[str]) -> None:
        self.model = model
        self.errors = list(errors)
        message = ", ".join(self.errors) if self.errors else "invalid payload"
        super().__init__(f"{model.__name__} validation failed: {message}")


@dataclass(frozen=True)
class FieldSpec:
    expected: Any
    description: str
    required: bool = True


@dataclass(frozen=True)
class SequenceSpec:
    item: Any


@dataclass(frozen=True)
class PairSpec:
    """A two element ``[first, second]`` entry, as authored for quantities."""

    first: Any
    second: Any


def is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def is_unsigned_int(value: Any) -> bool:
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    return 0 <= value <= U64_MAX


def is_tagged_mapping(value: Any) -> bool:
    """Return ``True`` for an externally tagged ``{"Variant": {...}}`` payload."""

    if isinstance(value, str):
        return value.strip() != ""
    return isinstance(value, Mapping) and len(value) == 1


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _matches_type(value: Any, expected: Any) -> bool:
    if isinstance(expected, SequenceSpec):
        return _is_sequence(value) and all(
            _matches_type(item, expected.item) for item in value
        )
    if isinstance(expected, PairSpec):
        if not _is_sequence(value) or len(value) != 2:
            return False
        return _matches_type(value[0], expected.first) and _matches_type(
            value[1], expected.second
        )
    if isinstance(expected, tuple):
        return any(_matches_type(value, part) for part in expected)
    # ``typing.Mapping`` and friends are aliases rather than classes.
    origin = get_origin(expected)
    if origin is not None:
        expected = origin
    if isinstance(expected, type):
        if expected is int:
            return isinstance(value, int) and not isinstance(value, bool)
        if expected is float:
            return isinstance(value, Real) and not isinstance(value, bool)
        return isinstance(value, expected)
    return bool(expected(value))


class ModelValidator:
    """Base class for document payload validators."""

    model: ClassVar[type[Any]]
    fields: ClassVar[Mapping[str, FieldSpec]]

    @classmethod
    def validate(cls, data: Any) -> dict[str, Any]:
        if not isinstance(data, Mapping):
            raise ModelValidationError(
                cls.model, ["Payload must be a mapping of field names to values"]
            )

        errors: list[str] = []
        normalized: dict[str, Any] = {}

        for name, spec in cls.fields.items():
            if name not in data:
                if spec.required:
                    errors.append(f"Missing required field '{name}' ({spec.description})")
                continue

            value = data[name]
            if value is None:
                errors.append(f"Field '{name}' cannot be null")
            elif not _matches_type(value, spec.expected):
                errors.append(
                    f"Field '{name}' expected {spec.description}, "
                    f"received {type(value).__name__}"
                )
            else:
                normalized[name] = value

        if errors:
            raise ModelValidationError(cls.model, errors)

        return normalized


def validate_dataclass_payload(cls: type[Any], data: Any) -> dict[str, Any]:
    """Validate payload for a dataclass if a validator is registered."""

    validator: type[ModelValidator] | None = getattr(cls, "validator", None)
    if validator is None:
        if not isinstance(data, Mapping):
            raise ModelValidationError(cls, ["Payload must be a mapping"])
        return dict(data)
    return validator.validate(data)


def load_dataclass(cls: type[Any], data: Any) -> Any:
    payload = validate_dataclass_payload(cls, data)
    factory = getattr(cls, "from_dict", None)
    if callable(factory):
        return factory(payload)
    return cls(**payload)


def split_tagged(model: type[Any], value: Any) -> tuple[str, Mapping[str, Any]]:
    """Split an externally tagged union payload into ``(tag, body)``.

    ``"Keepsake"``, ``{"Keepsake": None}`` and ``{"Keepsake": {}}`` all yield
    an empty body.
    """

    if isinstance(value, str):
        return value.strip(), {}
    if not is_tagged_mapping(value):
        raise ModelValidationError(
            model, ["Tagged payload must be a mapping with exactly one variant key"]
        )
    ((tag, body),) = value.items()
    if body is None:
        body = {}
    if not isinstance(body, Mapping):
        raise ModelValidationError(
            model, [f"Variant '{tag}' must map to a table of fields"]
        )
    return str(tag), body


__all__ = [
    "FieldSpec",
    "ModelValidationError",
    "ModelValidator",
    "PairSpec",
    "SequenceSpec",
    "is_non_empty_str",
    "is_tagged_mapping",
    "is_unsigned_int",
    "load_dataclass",
    "split_tagged",
    "validate_dataclass_payload",
]

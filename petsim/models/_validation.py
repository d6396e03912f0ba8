"""Payload checks shared by content definitions and persisted state."""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Real
from typing import Any, ClassVar, Mapping, Sequence


class ModelValidationError(ValueError):
    """Raised when a payload does not satisfy a model's requirements."""

    def __init__(self, model: type[Any], errors: Sequence[str]) -> None:
        self.model = model
        self.errors = list(errors)
        message = ", ".join(self.errors) if self.errors else "invalid payload"
        super().__init__(f"{model.__name__} validation failed: {message}")


class ContentError(ValueError):
    """A content definition is missing or references something that is."""

    def __init__(self, kind: str, key: str, detail: str | None = None) -> None:
        self.kind = kind
        self.key = key
        message = f"Unknown {kind} {key!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


@dataclass(frozen=True)
class FieldSpec:
    expected: Any
    description: str
    required: bool = True
    allow_none: bool = False


@dataclass(frozen=True)
class SequenceSpec:
    item: Any
    allow_empty: bool = True


@dataclass(frozen=True)
class MappingSpec:
    key: Any
    value: Any


def is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def is_positive_int(value: Any) -> bool:
    return is_non_negative_int(value) and value > 0


def is_unit_interval(value: Any) -> bool:
    return (
        isinstance(value, Real)
        and not isinstance(value, bool)
        and 0.0 <= float(value) <= 1.0
    )


def _matches(value: Any, expected: Any) -> bool:
    if expected is Any:
        return True
    # typing.Mapping and friends check against their collections.abc origin.
    expected = getattr(expected, "__origin__", None) or expected
    if isinstance(expected, SequenceSpec):
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            return False
        if not expected.allow_empty and not value:
            return False
        return all(_matches(item, expected.item) for item in value)
    if isinstance(expected, MappingSpec):
        return isinstance(value, Mapping) and all(
            _matches(key, expected.key) and _matches(item, expected.value)
            for key, item in value.items()
        )
    if isinstance(expected, tuple):
        return any(_matches(value, option) for option in expected)
    if expected is int:
        return isinstance(value, int) and not isinstance(value, bool)
    if expected is float:
        return isinstance(value, Real) and not isinstance(value, bool)
    if isinstance(expected, type):
        return isinstance(value, expected)
    if callable(expected):
        try:
            return bool(expected(value))
        except (TypeError, ValueError):
            return False
    return True


class ModelValidator:
    """Checks a raw mapping against a table of :class:`FieldSpec` entries.

    Content files are hand written, so unknown keys are reported as errors
    rather than silently carried along; persisted state validators may relax
    this with ``strict = False``.
    """

    model: ClassVar[type[Any]]
    fields: ClassVar[Mapping[str, FieldSpec]]
    strict: ClassVar[bool] = True

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
                if spec.allow_none:
                    normalized[name] = None
                else:
                    errors.append(f"Field '{name}' cannot be null")
                continue
            if not _matches(value, spec.expected):
                errors.append(
                    f"Field '{name}' expected {spec.description}, "
                    f"received {type(value).__name__}"
                )
                continue
            normalized[name] = value

        unknown = sorted(str(key) for key in data if key not in cls.fields)
        if unknown and cls.strict:
            errors.append(f"Unknown field(s): {', '.join(unknown)}")
        if errors:
            raise ModelValidationError(cls.model, errors)
        return normalized


def validate_payload(cls: type[Any], data: Any) -> dict[str, Any]:
    """Validate ``data`` with the validator registered on ``cls``."""

    validator: type[ModelValidator] | None = getattr(cls, "validator", None)
    if validator is None:
        if not isinstance(data, Mapping):
            raise ModelValidationError(cls, ["Payload must be a mapping"])
        return dict(data)
    return validator.validate(data)


__all__ = [
    "ContentError",
    "FieldSpec",
    "MappingSpec",
    "ModelValidationError",
    "ModelValidator",
    "SequenceSpec",
    "is_non_empty_str",
    "is_non_negative_int",
    "is_positive_int",
    "is_unit_interval",
    "validate_payload",
]

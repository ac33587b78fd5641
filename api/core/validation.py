"""
Generic payload validation against a declarative record schema.

A schema is any pydantic model. Its fields are the allowlist: declared fields
without a default are required, fields with a default are optional, and any
other key in the payload is dropped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ValidationError


class PayloadValidationError(ValueError):
    def __init__(self, violations: list[str]) -> None:
        super().__init__("; ".join(violations) or "Invalid payload.")
        self.violations = violations


@dataclass(frozen=True)
class ValidationResult:
    values: dict[str, Any] | None = None
    violations: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.values is not None and not self.violations


def _allowed_keys(schema: type[BaseModel]) -> set[str]:
    keys: set[str] = set()
    for name, info in schema.model_fields.items():
        keys.add(name)
        if info.alias:
            keys.add(info.alias)
    return keys


def _format_error(error: dict[str, Any]) -> str:
    loc = ".".join(str(part) for part in error.get("loc", ())) or "body"
    return f"{loc}: {error.get('msg', 'invalid value')}"


def validate_payload(payload: Any, schema: type[BaseModel]) -> ValidationResult:
    if not isinstance(payload, dict):
        return ValidationResult(violations=["Request body must be a JSON object."])

    allowed = _allowed_keys(schema)
    recognized = {k: v for (k, v) in payload.items() if k in allowed}
    if not recognized:
        return ValidationResult(violations=["Request body contains no recognizable fields."])

    try:
        model = schema.model_validate(recognized)
    except ValidationError as exc:
        return ValidationResult(violations=[_format_error(e) for e in exc.errors()])

    return ValidationResult(values=model.model_dump(by_alias=True))


def require_valid(payload: Any, schema: type[BaseModel]) -> dict[str, Any]:
    result = validate_payload(payload, schema)
    if not result.ok:
        raise PayloadValidationError(result.violations)
    return result.values or {}

"""Request body validation.

Every check runs before anything touches the store. Failures are collected
per field and raised together as one ValidationError.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeVar

from bugtracker.errors import FieldError, ValidationError
from bugtracker.model.bug import (
    DEFAULT_ASSIGNEE,
    DESCRIPTION_MAX_LENGTH,
    PERSON_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    UNKNOWN,
    BugPriority,
    BugStatus,
)

E = TypeVar("E", bound=StrEnum)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PASSWORD_MIN_LENGTH = 6
NAME_MAX_LENGTH = 50


@dataclass(frozen=True)
class _TextRule:
    key: str  # JSON key
    attr: str  # Bug attribute
    label: str
    max_length: int
    required: bool


_TEXT_RULES = (
    _TextRule("title", "title", "Title", TITLE_MAX_LENGTH, True),
    _TextRule("description", "description", "Description", DESCRIPTION_MAX_LENGTH, True),
    _TextRule("reportedBy", "reported_by", "Reporter name", PERSON_MAX_LENGTH, True),
    _TextRule("assignedTo", "assigned_to", "Assignee name", PERSON_MAX_LENGTH, False),
)


def validate_bug_fields(data: Any, *, partial: bool = False) -> dict[str, Any]:
    """Validate a bug body and return cleaned values keyed by Bug attribute.

    With ``partial=True`` only the keys present are checked and returned;
    otherwise required fields must be present and defaults are filled in.
    """
    body = _require_object(data)
    errors: list[FieldError] = []
    cleaned: dict[str, Any] = {}

    for rule in _TEXT_RULES:
        if rule.key not in body:
            if rule.required and not partial:
                errors.append(FieldError(rule.key, f"{rule.label} is required"))
            continue
        value = body[rule.key]
        if value is None:
            value = ""
        if not isinstance(value, str):
            errors.append(FieldError(rule.key, f"{rule.label} must be a string"))
            continue
        value = value.strip()
        if not value:
            if rule.required:
                errors.append(FieldError(rule.key, f"{rule.label} is required"))
                continue
            value = DEFAULT_ASSIGNEE
        if len(value) > rule.max_length:
            errors.append(
                FieldError(
                    rule.key,
                    f"{rule.label} cannot exceed {rule.max_length} characters",
                )
            )
            continue
        cleaned[rule.attr] = value

    for key, enum_cls, label in (
        ("status", BugStatus, "status"),
        ("priority", BugPriority, "priority level"),
    ):
        raw = body.get(key)
        if raw is None or raw == "":
            continue
        member = _enum_member(enum_cls, raw)
        if member is None:
            errors.append(FieldError(key, f"Invalid {label}"))
        else:
            cleaned[key] = member

    if "stepsToReproduce" in body:
        steps = body["stepsToReproduce"] or []
        if not isinstance(steps, list) or not all(isinstance(s, str) for s in steps):
            errors.append(
                FieldError("stepsToReproduce", "Steps to reproduce must be a list of strings")
            )
        else:
            cleaned["steps_to_reproduce"] = tuple(s.strip() for s in steps if s.strip())

    if "environment" in body:
        env = body["environment"] or {}
        if not isinstance(env, Mapping) or not all(
            isinstance(env.get(k, ""), str) for k in ("os", "browser", "version")
        ):
            errors.append(
                FieldError("environment", "Environment must be an object of strings")
            )
        else:
            cleaned["environment"] = {
                k: env[k].strip() or UNKNOWN
                for k in ("os", "browser", "version")
                if k in env
            }

    if errors:
        raise ValidationError("Validation failed", errors=errors)

    if not partial:
        cleaned.setdefault("status", BugStatus.OPEN)
        cleaned.setdefault("priority", BugPriority.MEDIUM)
        cleaned.setdefault("assigned_to", DEFAULT_ASSIGNEE)
    return cleaned


def validate_status(data: Any) -> BugStatus:
    return _validate_single(data, "status", BugStatus)


def validate_priority(data: Any) -> BugPriority:
    return _validate_single(data, "priority", BugPriority)


def validate_registration(data: Any) -> tuple[str, str, str]:
    """Return ``(name, email, password)`` or raise ValidationError."""
    body = _require_object(data)
    errors: list[FieldError] = []
    name = body.get("name")
    if not isinstance(name, str) or not name.strip():
        errors.append(FieldError("name", "Name is required"))
    elif len(name.strip()) > NAME_MAX_LENGTH:
        errors.append(
            FieldError("name", f"Name cannot exceed {NAME_MAX_LENGTH} characters")
        )
    try:
        email, password = validate_credentials(body)
    except ValidationError as exc:
        errors.extend(exc.errors)
    if errors:
        raise ValidationError("Validation failed", errors=errors)
    return name.strip(), email, password


def validate_credentials(data: Any) -> tuple[str, str]:
    """Return ``(email, password)`` or raise ValidationError."""
    body = _require_object(data)
    errors: list[FieldError] = []
    email = body.get("email")
    password = body.get("password")
    if not isinstance(email, str) or not EMAIL_RE.match(email.strip()):
        errors.append(FieldError("email", "Please provide a valid email"))
    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
        errors.append(
            FieldError(
                "password",
                f"Password must be at least {PASSWORD_MIN_LENGTH} characters long",
            )
        )
    if errors:
        raise ValidationError("Validation failed", errors=errors)
    return email.strip().lower(), password


def _validate_single(data: Any, key: str, enum_cls: type[E]) -> E:
    body = _require_object(data)
    raw = body.get(key)
    if raw is None or raw == "":
        raise ValidationError.for_field(key, f"{key.capitalize()} is required")
    member = _enum_member(enum_cls, raw)
    if member is None:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError.for_field(
            key, f"Invalid {key}. Must be one of: {allowed}"
        )
    return member


def _enum_member(enum_cls: type[E], raw: Any) -> E | None:
    try:
        return enum_cls(raw)
    except (ValueError, TypeError):
        return None


def _require_object(data: Any) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValidationError("Request body must be a JSON object")
    return data

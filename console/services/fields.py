"""
Form field descriptors and the validator that gates form submission.

A FieldSpec is static configuration (part of an ADD screen's config).
A FieldDescriptor is the mutable per-form copy that tracks the current
value and its tri-state validity:

    None:  not validated yet (a fresh form shows no error styling)
    True:  last validation passed
    False: last validation failed

Validation never raises; an invalid value is a normal outcome.
"""
from __future__ import annotations

import enum
import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

FieldValue = str | bool | int | float


class FieldKind(str, enum.Enum):
    FIXED = "fixed"
    INPUT = "input"
    SELECT = "select"
    CHECKBOX = "checkbox"
    TEXTAREA = "textarea"


@dataclass(frozen=True)
class ValidationRule:
    """Validation rule for a single field. Every constraint is optional."""
    pattern: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    required: bool = False
    predicate: Optional[Callable[[Any], bool]] = None
    strip: bool = False


@dataclass(frozen=True)
class FieldConfig:
    """Widget metadata plus the validation rule, shared by every form using the field."""
    label: str
    type: str = "text"
    placeholder: Optional[str] = None
    icon: Optional[str] = None
    help: Optional[str] = None
    options: tuple[str, ...] = ()
    rule: Optional[ValidationRule] = None


@dataclass(frozen=True)
class FieldSpec:
    kind: FieldKind
    key: str
    config: FieldConfig
    value: FieldValue = ""
    label: bool = True
    validate: bool = True
    nullify: bool = False
    clear: bool = False
    # FIXED fields take their value from this path param when the form mounts.
    source: Optional[str] = None


@dataclass(frozen=True)
class ValidationOutcome:
    normalized: Any
    valid: bool


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _as_number(value: Any) -> Optional[float]:
    """Finite float for `value`, or None. NaN and infinities never satisfy a range."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value) if isinstance(value, (int, float)) else float(str(value).strip())
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def validate_value(raw: Any, rule: Optional[ValidationRule], gated: bool = True) -> ValidationOutcome:
    """
    Apply `rule` to `raw`.

    Fields without a rule, or that do not gate submission, are always valid
    and their value is returned untouched.
    """
    if rule is None or not gated:
        return ValidationOutcome(normalized=raw, valid=True)

    value = raw
    if rule.strip and isinstance(value, str):
        value = value.strip()

    if _is_empty(value):
        # Optional empty values skip the remaining checks
        return ValidationOutcome(normalized=value, valid=not rule.required)

    if isinstance(value, str):
        if rule.min_length is not None and len(value) < rule.min_length:
            return ValidationOutcome(normalized=value, valid=False)
        if rule.max_length is not None and len(value) > rule.max_length:
            return ValidationOutcome(normalized=value, valid=False)
        if rule.pattern is not None and re.fullmatch(rule.pattern, value) is None:
            return ValidationOutcome(normalized=value, valid=False)

    if rule.minimum is not None or rule.maximum is not None:
        number = _as_number(value)
        if number is None:
            return ValidationOutcome(normalized=value, valid=False)
        if rule.minimum is not None and number < rule.minimum:
            return ValidationOutcome(normalized=value, valid=False)
        if rule.maximum is not None and number > rule.maximum:
            return ValidationOutcome(normalized=value, valid=False)

    if rule.predicate is not None:
        try:
            ok = bool(rule.predicate(value))
        except Exception:
            # A predicate that blows up cannot vouch for the value
            ok = False
        return ValidationOutcome(normalized=value, valid=ok)

    return ValidationOutcome(normalized=value, valid=True)


@dataclass
class FieldDescriptor:
    """Mutable state of one field inside a mounted form."""
    spec: FieldSpec
    value: FieldValue = ""
    valid: Optional[bool] = None
    default: FieldValue = ""

    @classmethod
    def from_spec(cls, spec: FieldSpec, path_params: Optional[dict[str, str]] = None) -> "FieldDescriptor":
        value = spec.value
        if spec.kind == FieldKind.FIXED and spec.source:
            value = (path_params or {}).get(spec.source, spec.value)
        return cls(spec=spec, value=value, valid=None, default=value)

    @property
    def key(self) -> str:
        return self.spec.key

    @property
    def kind(self) -> FieldKind:
        return self.spec.kind

    @property
    def gated(self) -> bool:
        return self.spec.validate

    @property
    def is_empty(self) -> bool:
        return _is_empty(self.value)

    def run_validation(self) -> bool:
        """Re-validate the current value and record the result."""
        outcome = validate_value(self.value, self.spec.config.rule, gated=self.spec.validate)
        self.valid = outcome.valid
        return outcome.valid

    def handle_change(self, value: FieldValue) -> bool:
        """Apply a user edit. FIXED fields keep their mounted value."""
        if self.kind != FieldKind.FIXED:
            self.value = value
        return self.run_validation()

    def reset(self) -> None:
        self.value = self.default
        self.valid = None

    def payload_value(self) -> FieldValue:
        return validate_value(self.value, self.spec.config.rule, gated=self.spec.validate).normalized


@dataclass
class FieldSet:
    """Ordered collection of descriptors with lookup by key."""
    fields: list[FieldDescriptor] = field(default_factory=list)

    def get(self, key: str) -> Optional[FieldDescriptor]:
        for f in self.fields:
            if f.key == key:
                return f
        return None

    def __iter__(self):
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

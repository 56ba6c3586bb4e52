"""
Form sessions for ADD screens.

Public API
----------
FormStore.mount(resource, config, pathname, path_params) → FormState
FormStore.get(form_id)                                   → FormState
FormStore.unmount(form_id)
FormState.change(key, value)                             → FieldDescriptor
FormState.submit(api)                                    → SubmitResult

Submit protocol
---------------
1. Re-validate every field.
2. Any gated field invalid → INVALID; nothing is sent, values untouched.
3. Build the payload (nullified empty fields are omitted).
4. POST it to the form URL.
5. Success → reset `clear` fields, navigate to form.path(pathname).
6. Failure → FAILED; values untouched so the user can retry.

A form unmounted while its request is in flight gets STALE and its state
is not written.
"""
from __future__ import annotations

import enum
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from console.core.errors import (
    ConsoleException,
    FieldNotFoundError,
    FormNotFoundError,
    SubmitFailedError,
    SubmitInFlightError,
)
from console.services.fields import FieldDescriptor, FieldSet, FieldValue
from console.services.resources import AddConfig

logger = logging.getLogger(__name__)


class SubmitStatus(str, enum.Enum):
    SUBMITTED = "submitted"
    INVALID = "invalid"
    FAILED = "failed"
    STALE = "stale"


class CreateApi(Protocol):
    async def post_json(self, url: str, payload: dict[str, Any]) -> Any: ...


@dataclass
class SubmitResult:
    status: SubmitStatus
    payload: Optional[dict[str, Any]] = None
    navigate_to: Optional[str] = None
    invalid_field: Optional[str] = None
    invalid: list[str] = field(default_factory=list)
    error: Optional[ConsoleException] = None
    created: Any = None


@dataclass
class FormState:
    """All mutable state of one mounted ADD form."""
    id: str
    resource: str
    pathname: str
    config: AddConfig
    path_params: dict[str, str] = field(default_factory=dict)
    fields: FieldSet = field(default_factory=FieldSet)
    mounted: bool = True
    submitting: bool = False
    last_error: Optional[ConsoleException] = None

    @property
    def title(self) -> Optional[str]:
        return self.config.header.title

    @property
    def back(self) -> Optional[str]:
        path = self.config.header.path
        return path(self.pathname) if path else None

    @property
    def url(self) -> str:
        return self.config.form.url(self.path_params)

    def get_field(self, key: str) -> FieldDescriptor:
        descriptor = self.fields.get(key)
        if descriptor is None:
            raise FieldNotFoundError(key)
        return descriptor

    def change(self, key: str, value: FieldValue) -> FieldDescriptor:
        descriptor = self.get_field(key)
        descriptor.handle_change(value)
        return descriptor

    def validate_all(self) -> list[str]:
        """Re-validate every field; return keys of gated fields that failed, in form order."""
        invalid = []
        for descriptor in self.fields:
            if not descriptor.run_validation() and descriptor.gated:
                invalid.append(descriptor.key)
        return invalid

    def build_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for descriptor in self.fields:
            if descriptor.spec.nullify and descriptor.is_empty:
                continue
            payload[descriptor.key] = descriptor.payload_value()
        return payload

    async def submit(self, api: CreateApi) -> SubmitResult:
        if self.submitting:
            raise SubmitInFlightError(self.id)

        invalid = self.validate_all()
        if invalid:
            return SubmitResult(
                status=SubmitStatus.INVALID,
                invalid_field=invalid[0],
                invalid=invalid,
            )

        payload = self.build_payload()
        url = self.url
        self.submitting = True
        try:
            created = await api.post_json(url, payload)
        except SubmitFailedError as exc:
            if not self.mounted:
                logger.info(f"Form {self.id} unmounted during a failed submit; dropping result")
                return SubmitResult(status=SubmitStatus.STALE, payload=payload, error=exc)
            self.last_error = exc
            return SubmitResult(status=SubmitStatus.FAILED, payload=payload, error=exc)
        finally:
            self.submitting = False

        if not self.mounted:
            logger.info(f"Form {self.id} unmounted during submit; dropping result")
            return SubmitResult(status=SubmitStatus.STALE, payload=payload, created=created)

        for descriptor in self.fields:
            if descriptor.spec.clear:
                descriptor.reset()
        self.last_error = None
        logger.info(f"Created {self.resource} via {url}")
        return SubmitResult(
            status=SubmitStatus.SUBMITTED,
            payload=payload,
            navigate_to=self.config.form.path(self.pathname),
            created=created,
        )


class FormStore:
    """Arena of mounted forms, one FormState per form id."""

    def __init__(self):
        self._forms: dict[str, FormState] = {}

    def __len__(self) -> int:
        return len(self._forms)

    def mount(
        self,
        resource: str,
        config: AddConfig,
        pathname: str,
        path_params: Optional[dict[str, str]] = None,
    ) -> FormState:
        path_params = dict(path_params or {})
        form = FormState(
            id=uuid.uuid4().hex,
            resource=resource,
            pathname=pathname,
            config=config,
            path_params=path_params,
            fields=FieldSet([FieldDescriptor.from_spec(s, path_params) for s in config.form.fields]),
        )
        self._forms[form.id] = form
        return form

    def get(self, form_id: str) -> FormState:
        form = self._forms.get(form_id)
        if form is None:
            raise FormNotFoundError(form_id)
        return form

    def unmount(self, form_id: str) -> None:
        form = self._forms.pop(form_id, None)
        if form is None:
            raise FormNotFoundError(form_id)
        form.mounted = False

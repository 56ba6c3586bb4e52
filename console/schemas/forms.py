"""
Form session schemas.

POST   /forms                     MountFormRequest  → FormResponse
PATCH  /forms/{id}/fields/{key}   FieldChangeRequest → FieldOut
POST   /forms/{id}/submit                           → SubmitResponse
"""
from __future__ import annotations

from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, field_validator


class MountFormRequest(BaseModel):
    pathname: Annotated[str, Field(
        min_length=1,
        description="Console pathname of an ADD screen.",
        examples=["/console/projects/p1/testbeds/add"],
    )]

    @field_validator("pathname", mode="before")
    @classmethod
    def strip_pathname(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v


class FieldChangeRequest(BaseModel):
    """One input event on a field."""
    value: Union[StrictBool, StrictInt, StrictFloat, str] = Field(
        description="New raw value. Checkbox fields take booleans.",
        examples=["my-testbed", True],
    )


class FieldOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str
    kind: str
    label: Optional[str] = Field(default=None, description="Null when the field renders without a label.")
    type: str
    placeholder: Optional[str] = None
    icon: Optional[str] = None
    help: Optional[str] = None
    options: list[str] = Field(default_factory=list)
    value: Any = None
    valid: Optional[bool] = Field(default=None, description="Null until the field is first validated.")
    validate_: bool = Field(alias="validate", description="Whether the field gates submission.")
    nullify: bool
    clear: bool


class FormResponse(BaseModel):
    id: str
    resource: str
    pathname: str
    title: Optional[str] = None
    back: Optional[str] = None
    fields: list[FieldOut]


class SubmitResponse(BaseModel):
    status: str
    payload: Optional[dict[str, Any]] = None
    navigate_to: Optional[str] = Field(default=None, description="Where the shell should navigate next.")
    created: Any = Field(default=None, description="Entity echoed by the API, if any.")
    form: Optional[FormResponse] = Field(default=None, description="Form state after the submit.")

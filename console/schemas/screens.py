"""
Render-instruction schemas for LIST and VIEW screens.

GET /screens/{pathname}   → ScreenResponse (table or deck populated)
GET /navigation           → list[NavigationEntry]
"""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from console.schemas.common import ErrorResponse


class ButtonOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kind: str
    path: Optional[str] = Field(default=None, description="Navigation target; null for actions like refresh.")


class CellOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kind: Optional[str] = Field(default=None, description="Null for reserved columns, which render empty.")
    value: Any = None


class RowOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: Any = Field(description="Primary display value of the row.")
    cells: list[CellOut]
    path: str = Field(description="Navigation target when the row is clicked.")


class TableOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: Optional[str] = None
    buttons: list[ButtonOut]
    rows: list[RowOut]


class CardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    field: str = Field(description="Card label.")
    value: Any = None


class DeckOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: Optional[str] = None
    back: Optional[str] = Field(default=None, description="Path of the parent screen.")
    cards: list[CardOut]
    buttons: list[ButtonOut] = Field(default_factory=list)


class ScreenResponse(BaseModel):
    """A rendered LIST or VIEW screen."""
    id: str = Field(description="Screen identity; pass it back as `screen` to keep a session and reload it in place.")
    resource: str
    operation: Literal["list", "view"]
    pathname: str
    path_params: dict[str, str]
    status: Literal["ready", "error"]
    stale: bool = Field(default=False, description="True when a newer load of this screen superseded this one.")
    error: Optional[ErrorResponse] = None
    table: Optional[TableOut] = None
    deck: Optional[DeckOut] = None


class NavigationEntry(BaseModel):
    resource: str
    project_scoped: bool
    operations: list[str] = Field(description="Only operations the resource supports.")

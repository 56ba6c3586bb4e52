"""
Table renderer for LIST screens.

Turns a ListConfig plus the fetched entity array into display rows. Header
buttons are returned as `{kind, path}` metadata; wiring them to handlers is
the shell's job.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from console.services.resources import Button, ListConfig, RowItemKind


@dataclass(frozen=True)
class RenderButton:
    kind: str
    path: Optional[str] = None


@dataclass(frozen=True)
class RenderCell:
    kind: Optional[str]
    value: Any = None


@dataclass(frozen=True)
class RenderRow:
    key: Any
    cells: tuple[RenderCell, ...]
    path: str


@dataclass(frozen=True)
class TableRender:
    title: Optional[str]
    buttons: tuple[RenderButton, ...]
    rows: tuple[RenderRow, ...] = field(default_factory=tuple)


def render_buttons(buttons: tuple[Button, ...], pathname: str) -> tuple[RenderButton, ...]:
    return tuple(
        RenderButton(kind=b.kind.value, path=b.path(pathname) if b.path else None)
        for b in buttons
    )


def render_table(config: ListConfig, data: Any, pathname: str) -> TableRender:
    """
    Project `data` through the row config.

    `data` that is not a list (still loading, or a bad payload) renders as
    zero rows.
    """
    rows: list[RenderRow] = []
    if isinstance(data, list):
        row = config.table.row
        for datum in data:
            if not isinstance(datum, dict):
                continue
            cells = []
            for item in row.items:
                if item.kind == RowItemKind.TEXT and item.key:
                    cells.append(RenderCell(kind=item.kind.value, value=datum.get(item.key)))
                else:
                    cells.append(RenderCell(kind=None))
            rows.append(RenderRow(
                key=datum.get(row.key),
                cells=tuple(cells),
                path=row.path(pathname, datum),
            ))

    return TableRender(
        title=config.header.title,
        buttons=render_buttons(config.header.buttons, pathname),
        rows=tuple(rows),
    )

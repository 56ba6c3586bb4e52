"""
Deck renderer for VIEW screens: one entity as labelled cards.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from console.services.resources import ViewConfig
from console.services.table import RenderButton, render_buttons


@dataclass(frozen=True)
class RenderCard:
    field: str
    value: Any = None


@dataclass(frozen=True)
class DeckRender:
    title: Optional[str]
    back: Optional[str]
    cards: tuple[RenderCard, ...]
    buttons: tuple[RenderButton, ...] = ()


def render_deck(config: ViewConfig, entity: Any, pathname: str) -> DeckRender:
    """Cards keep declared order; keys missing from `entity` render as None."""
    source = entity if isinstance(entity, dict) else {}
    header = config.header
    title = source.get(header.key) if header.key else header.title
    return DeckRender(
        title=title,
        back=header.path(pathname) if header.path else None,
        cards=tuple(RenderCard(field=c.field, value=source.get(c.key)) for c in config.deck.cards),
        buttons=render_buttons(config.deck.buttons, pathname),
    )

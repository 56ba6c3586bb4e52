"""
Screens router.

GET    /navigation              resources and their supported operations
GET    /screens/{pathname}      render a LIST or VIEW screen
DELETE /screens/{screen_id}     unmount a screen session
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from console.core.deps import get_registry, get_screen_controller, get_screen_store
from console.core.errors import ScreenSessionNotFoundError
from console.schemas.common import ErrorResponse
from console.schemas.screens import (
    ButtonOut,
    CardOut,
    CellOut,
    DeckOut,
    NavigationEntry,
    RowOut,
    ScreenResponse,
    TableOut,
)
from console.services.deck import DeckRender
from console.services.resources import ResourceRegistry
from console.services.screens import ScreenController, ScreenResult, ScreenStore
from console.services.table import TableRender

router = APIRouter(tags=["screens"])


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _table_out(render: TableRender) -> TableOut:
    return TableOut(
        title=render.title,
        buttons=[ButtonOut(kind=b.kind, path=b.path) for b in render.buttons],
        rows=[
            RowOut(
                key=r.key,
                cells=[CellOut(kind=c.kind, value=c.value) for c in r.cells],
                path=r.path,
            )
            for r in render.rows
        ],
    )


def _deck_out(render: DeckRender) -> DeckOut:
    return DeckOut(
        title=render.title,
        back=render.back,
        cards=[CardOut(field=c.field, value=c.value) for c in render.cards],
        buttons=[ButtonOut(kind=b.kind, path=b.path) for b in render.buttons],
    )


def _screen_to_response(result: ScreenResult) -> ScreenResponse:
    route = result.session.route
    render = result.render
    return ScreenResponse(
        id=result.session.id,
        resource=route.resource,
        operation=route.operation.value,
        pathname=route.pathname,
        path_params=route.path_params,
        status=result.status.value,
        stale=result.stale,
        error=ErrorResponse(**result.error.to_dict()) if result.error else None,
        table=_table_out(render) if isinstance(render, TableRender) else None,
        deck=_deck_out(render) if isinstance(render, DeckRender) else None,
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.get(
    "/navigation",
    response_model=list[NavigationEntry],
    summary="Resources and the operations they offer",
)
def navigation(registry: ResourceRegistry = Depends(get_registry)):
    """Operations a resource does not support are never listed."""
    return registry.navigation()


@router.get(
    "/screens/{pathname:path}",
    response_model=ScreenResponse,
    summary="Render a LIST or VIEW screen",
    responses={
        404: {"description": "No screen or no configuration for that pathname."},
    },
)
async def render_screen(
    pathname: str,
    screen: Optional[str] = Query(
        default=None,
        description="Screen identity to own. Loads without one are one-shot and keep no session.",
    ),
    controller: ScreenController = Depends(get_screen_controller),
):
    """
    Fetch the entities behind `pathname` from the Bencher API and return the
    render instructions.

    An API failure still returns **200** with `status: "error"` and an empty
    table or deck, so the shell can show an error state.
    """
    result = await controller.load("/" + pathname, screen_id=screen)
    return _screen_to_response(result)


@router.delete(
    "/screens/{screen_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unmount a screen session",
)
def unmount_screen(screen_id: str, store: ScreenStore = Depends(get_screen_store)):
    """Results of loads still in flight for this screen are dropped."""
    if not store.unmount(screen_id):
        raise ScreenSessionNotFoundError(screen_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

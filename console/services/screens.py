"""
Screen controller: fetch-then-render for LIST and VIEW screens.

Each screen identity owns a ScreenSession holding a three-state value
(loading / ready / error). A load bumps the session's generation; when the
fetch completes, its result is applied only if no newer load started and
the screen is still mounted. Older results are dropped rather than
cancelled.

Fetch failures never escape: they become an ERROR screen whose render is
empty (zero rows, or cards with no values).
"""
from __future__ import annotations

import enum
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Union

from console.core.errors import ConsoleException, FetchFailedError, ScreenNotFoundError
from console.services.deck import DeckRender, render_deck
from console.services.resources import ListConfig, Operation, ResourceRegistry, ViewConfig
from console.services.routes import ScreenRoute, resolve_screen
from console.services.table import TableRender, render_table

logger = logging.getLogger(__name__)

Render = Union[TableRender, DeckRender]


class ScreenStatus(str, enum.Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class ReadApi(Protocol):
    async def get_json(self, url: str) -> Any: ...


@dataclass
class ScreenSession:
    id: str
    route: ScreenRoute
    status: ScreenStatus = ScreenStatus.LOADING
    render: Optional[Render] = None
    error: Optional[ConsoleException] = None
    generation: int = 0
    mounted: bool = True

    def begin(self) -> int:
        self.generation += 1
        self.status = ScreenStatus.LOADING
        return self.generation

    def is_current(self, generation: int) -> bool:
        return self.mounted and generation == self.generation

    def apply(self, generation: int, render: Render, error: Optional[ConsoleException] = None) -> bool:
        """Store a finished load. Returns False (and changes nothing) when the load is stale."""
        if not self.is_current(generation):
            logger.debug(f"Dropping stale load {generation} for screen {self.id}")
            return False
        self.render = render
        self.error = error
        self.status = ScreenStatus.ERROR if error is not None else ScreenStatus.READY
        return True


@dataclass
class ScreenResult:
    session: ScreenSession
    render: Render
    status: ScreenStatus
    error: Optional[ConsoleException] = None
    stale: bool = False


class ScreenStore:
    """
    Arena of screen sessions keyed by screen id.

    Only sessions the caller owns (loaded with an explicit screen id) are
    kept. Past `max_sessions` the least recently mounted one is unmounted.
    """

    def __init__(self, max_sessions: int = 1024):
        self.max_sessions = max_sessions
        self._sessions: dict[str, ScreenSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def mount(self, route: ScreenRoute, screen_id: Optional[str] = None) -> ScreenSession:
        """
        Return the session for `screen_id`, creating it if needed.

        Without a screen id the session is one-shot: it gets a fresh id and
        is not stored. Navigating an existing screen id to a new route
        replaces its session, so a load still in flight for the old route
        is stale.
        """
        if screen_id is None:
            return ScreenSession(id=uuid.uuid4().hex, route=route)

        existing = self._sessions.pop(screen_id, None)
        if existing is not None and existing.route == route:
            self._sessions[screen_id] = existing
            return existing
        if existing is not None:
            existing.mounted = False

        session = ScreenSession(id=screen_id, route=route)
        self._sessions[screen_id] = session
        while len(self._sessions) > self.max_sessions:
            oldest = next(iter(self._sessions))
            logger.debug(f"Evicting screen session {oldest}")
            self._sessions.pop(oldest).mounted = False
        return session

    def get(self, screen_id: str) -> Optional[ScreenSession]:
        return self._sessions.get(screen_id)

    def unmount(self, screen_id: str) -> bool:
        session = self._sessions.pop(screen_id, None)
        if session is None:
            return False
        session.mounted = False
        return True


@dataclass
class ScreenController:
    registry: ResourceRegistry
    api: ReadApi
    store: ScreenStore = field(default_factory=ScreenStore)

    def resolve(self, pathname: str) -> ScreenRoute:
        route = resolve_screen(pathname, self.registry)
        if route is None:
            raise ScreenNotFoundError(pathname)
        return route

    async def load(self, pathname: str, screen_id: Optional[str] = None) -> ScreenResult:
        """Resolve, fetch and render the LIST or VIEW screen at `pathname`."""
        route = self.resolve(pathname)
        config = self.registry.require_config(route.resource, route.operation)
        if route.operation == Operation.ADD:
            # ADD screens are forms; they are mounted through the FormStore
            raise ScreenNotFoundError(pathname)

        # Building the URL can fail on a bad route; that is the caller's problem
        if isinstance(config, ListConfig):
            url = config.table.url(route.path_params)
        else:
            url = config.deck.url(route.path_params)

        session = self.store.mount(route, screen_id)
        generation = session.begin()

        error: Optional[ConsoleException] = None
        try:
            data = await self.api.get_json(url)
        except FetchFailedError as exc:
            logger.warning(f"Screen {route.pathname} failed to load: {exc.message}")
            data, error = None, exc

        render = self._render(config, data, route.pathname)
        applied = session.apply(generation, render, error)
        return ScreenResult(
            session=session,
            render=render,
            status=(ScreenStatus.ERROR if error is not None else ScreenStatus.READY),
            error=error,
            stale=not applied,
        )

    @staticmethod
    def _render(config: Union[ListConfig, ViewConfig], data: Any, pathname: str) -> Render:
        if isinstance(config, ListConfig):
            return render_table(config, data, pathname)
        return render_deck(config, data, pathname)

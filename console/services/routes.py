"""
Maps a console pathname onto the screen it names.

    /console/projects                          projects LIST
    /console/projects/add                      projects ADD
    /console/projects/{project_slug}           projects VIEW
    /console/projects/{project_slug}/{res}     res LIST
    /console/projects/{project_slug}/{res}/add res ADD
    /console/projects/{project_slug}/{res}/{s} res VIEW
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from console.services.paths import ADD_SEGMENT
from console.services.resources import Operation, ResourceRegistry

CONSOLE_ROOT = "console"
PROJECTS = "projects"


@dataclass(frozen=True)
class ScreenRoute:
    resource: str
    operation: Operation
    pathname: str
    path_params: dict[str, str] = field(default_factory=dict)


def normalize_pathname(pathname: str) -> str:
    return "/" + "/".join(s for s in (pathname or "").split("/") if s)


def resolve_screen(pathname: str, registry: ResourceRegistry) -> Optional[ScreenRoute]:
    """Return the screen for `pathname`, or None when nothing matches."""
    normalized = normalize_pathname(pathname)
    segments = [s for s in normalized.split("/") if s]
    if len(segments) < 2 or segments[0] != CONSOLE_ROOT or segments[1] != PROJECTS:
        return None
    rest = segments[2:]

    projects = registry.resource(PROJECTS)
    if projects is None:
        return None

    if not rest:
        return ScreenRoute(PROJECTS, Operation.LIST, normalized)
    if len(rest) == 1:
        if rest[0] == ADD_SEGMENT:
            return ScreenRoute(PROJECTS, Operation.ADD, normalized)
        return ScreenRoute(
            PROJECTS, Operation.VIEW, normalized, {projects.slug_param: rest[0]}
        )

    params = {projects.slug_param: rest[0]}
    resource = registry.resource(rest[1])
    if resource is None or not resource.project_scoped:
        return None
    if len(rest) == 2:
        return ScreenRoute(resource.name, Operation.LIST, normalized, params)
    if len(rest) == 3:
        if rest[2] == ADD_SEGMENT:
            return ScreenRoute(resource.name, Operation.ADD, normalized, params)
        params[resource.slug_param] = rest[2]
        return ScreenRoute(resource.name, Operation.VIEW, normalized, params)
    return None

"""
Declarative resource configuration.

Each resource maps the operations it supports (LIST, ADD, VIEW) to an
immutable config record. The renderers in `table`, `forms` and `deck`
interpret those records, so adding a resource is a data change only.

An operation missing from a resource's mapping is not supported and is
never offered in navigation.
"""
from __future__ import annotations

import enum
import string
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Union

from console.core.errors import ConfigurationAbsentError, PathParamMissingError
from console.services import field_configs
from console.services.fields import FieldKind, FieldSpec
from console.services.paths import add_path, parent_path, view_path


class Operation(str, enum.Enum):
    LIST = "list"
    ADD = "add"
    VIEW = "view"


class ButtonKind(str, enum.Enum):
    ADD = "add"
    REFRESH = "refresh"


class RowItemKind(str, enum.Enum):
    TEXT = "text"


PathFn = Callable[[str], str]
RowPathFn = Callable[[str, Mapping[str, Any]], str]


# ---------------------------------------------------------------------------
# URL templates
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UrlTemplate:
    """
    A URL built from path params, e.g.
    "{base}/v0/projects/{project_slug}/testbeds".

    Building is pure string formatting; `base` is bound at construction.
    """
    template: str
    base: str = ""

    @property
    def params(self) -> tuple[str, ...]:
        return tuple(
            name for _, name, _, _ in string.Formatter().parse(self.template)
            if name and name != "base"
        )

    def __call__(self, path_params: Optional[Mapping[str, str]] = None) -> str:
        path_params = path_params or {}
        values = {"base": self.base.rstrip("/")}
        for name in self.params:
            value = path_params.get(name)
            if value is None or value == "":
                raise PathParamMissingError(param=name, template=self.template)
            values[name] = value
        return self.template.format(**values)


# ---------------------------------------------------------------------------
# Config records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Button:
    kind: ButtonKind
    path: Optional[PathFn] = None


@dataclass(frozen=True)
class Header:
    title: Optional[str] = None
    buttons: tuple[Button, ...] = ()
    # VIEW headers take their title from this entity key
    key: Optional[str] = None
    path: Optional[PathFn] = None


@dataclass(frozen=True)
class RowItem:
    """A table column. Kind-less items are reserved columns that render empty."""
    kind: Optional[RowItemKind] = None
    key: Optional[str] = None


@dataclass(frozen=True)
class RowConfig:
    key: str
    items: tuple[RowItem, ...]
    path: RowPathFn


@dataclass(frozen=True)
class TableConfig:
    url: UrlTemplate
    row: RowConfig


@dataclass(frozen=True)
class FormConfig:
    url: UrlTemplate
    fields: tuple[FieldSpec, ...]
    path: PathFn


@dataclass(frozen=True)
class Card:
    field: str
    key: str


@dataclass(frozen=True)
class DeckConfig:
    url: UrlTemplate
    cards: tuple[Card, ...]
    buttons: tuple[Button, ...] = ()


@dataclass(frozen=True)
class ListConfig:
    header: Header
    table: TableConfig
    operation: Operation = Operation.LIST


@dataclass(frozen=True)
class AddConfig:
    header: Header
    form: FormConfig
    operation: Operation = Operation.ADD


@dataclass(frozen=True)
class ViewConfig:
    header: Header
    deck: DeckConfig
    operation: Operation = Operation.VIEW


OperationConfig = Union[ListConfig, AddConfig, ViewConfig]


@dataclass(frozen=True)
class ResourceConfig:
    name: str
    # Route param naming one entity of this resource, e.g. "testbed_slug"
    slug_param: str
    project_scoped: bool = True
    operations: Mapping[Operation, OperationConfig] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self):
        for op, config in self.operations.items():
            if config.operation != op:
                raise ValueError(
                    f"{self.name}: {op.value} entry holds a {config.operation.value} config"
                )
        # Freeze whatever mapping was handed in
        object.__setattr__(self, "operations", MappingProxyType(dict(self.operations)))


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class ResourceRegistry:
    """Read-only lookup from (resource, operation) to config."""

    def __init__(self, resources: list[ResourceConfig] | tuple[ResourceConfig, ...]):
        by_name = {}
        for resource in resources:
            if resource.name in by_name:
                raise ValueError(f"duplicate resource {resource.name!r}")
            by_name[resource.name] = resource
        self._resources: Mapping[str, ResourceConfig] = MappingProxyType(by_name)

    def resources(self) -> list[str]:
        return list(self._resources)

    def resource(self, name: str) -> Optional[ResourceConfig]:
        return self._resources.get(name)

    def operations(self, name: str) -> list[Operation]:
        resource = self._resources.get(name)
        if resource is None:
            return []
        return list(resource.operations)

    def get_config(self, name: str, operation: Operation | str) -> Optional[OperationConfig]:
        resource = self._resources.get(name)
        if resource is None:
            return None
        try:
            op = Operation(operation)
        except ValueError:
            return None
        return resource.operations.get(op)

    def require_config(self, name: str, operation: Operation | str) -> OperationConfig:
        config = self.get_config(name, operation)
        if config is None:
            op = operation.value if isinstance(operation, Operation) else str(operation)
            raise ConfigurationAbsentError(resource=name, operation=op)
        return config

    def navigation(self) -> list[dict]:
        return [
            {
                "resource": name,
                "project_scoped": resource.project_scoped,
                "operations": [op.value for op in resource.operations],
            }
            for name, resource in self._resources.items()
        ]


# ---------------------------------------------------------------------------
# Built-in resources
# ---------------------------------------------------------------------------

def _list_buttons() -> tuple[Button, ...]:
    return (Button(kind=ButtonKind.ADD, path=add_path), Button(kind=ButtonKind.REFRESH))


def _projects(base: str) -> ResourceConfig:
    fields = field_configs.PROJECT_FIELDS
    return ResourceConfig(
        name="projects",
        slug_param="project_slug",
        project_scoped=False,
        operations={
            Operation.LIST: ListConfig(
                header=Header(title="Projects", buttons=_list_buttons()),
                table=TableConfig(
                    url=UrlTemplate("{base}/v0/projects", base),
                    row=RowConfig(
                        key="name",
                        items=(RowItem(RowItemKind.TEXT, "slug"), RowItem(), RowItem(), RowItem()),
                        path=view_path,
                    ),
                ),
            ),
            Operation.ADD: AddConfig(
                header=Header(title="Add Project", path=parent_path),
                form=FormConfig(
                    url=UrlTemplate("{base}/v0/projects", base),
                    fields=(
                        FieldSpec(FieldKind.INPUT, "name", fields["name"], clear=True),
                        FieldSpec(FieldKind.INPUT, "slug", fields["slug"], validate=False, nullify=True),
                        FieldSpec(FieldKind.TEXTAREA, "description", fields["description"], validate=False, nullify=True),
                        FieldSpec(FieldKind.INPUT, "url", fields["url"], nullify=True),
                        FieldSpec(FieldKind.CHECKBOX, "public", fields["public"], value=False, validate=False),
                    ),
                    path=parent_path,
                ),
            ),
            Operation.VIEW: ViewConfig(
                header=Header(key="name", path=parent_path),
                deck=DeckConfig(
                    url=UrlTemplate("{base}/v0/projects/{project_slug}", base),
                    cards=(
                        Card("Project Name", "name"),
                        Card("Project Slug", "slug"),
                        Card("Description", "description"),
                        Card("Project URL", "url"),
                    ),
                ),
            ),
        },
    )


def _testbeds(base: str) -> ResourceConfig:
    fields = field_configs.TESTBED_FIELDS
    optional = ("os_name", "os_version", "runtime_name", "runtime_version", "cpu", "ram", "disk")
    return ResourceConfig(
        name="testbeds",
        slug_param="testbed_slug",
        operations={
            Operation.LIST: ListConfig(
                header=Header(title="Testbeds", buttons=_list_buttons()),
                table=TableConfig(
                    url=UrlTemplate("{base}/v0/projects/{project_slug}/testbeds", base),
                    row=RowConfig(
                        key="name",
                        items=(RowItem(RowItemKind.TEXT, "slug"), RowItem(), RowItem(), RowItem()),
                        path=view_path,
                    ),
                ),
            ),
            Operation.ADD: AddConfig(
                header=Header(title="Add Testbed", path=parent_path),
                form=FormConfig(
                    url=UrlTemplate("{base}/v0/testbeds", base),
                    fields=(
                        FieldSpec(
                            FieldKind.FIXED, "project", field_configs.PROJECT_FIELDS["slug"],
                            source="project_slug",
                        ),
                        FieldSpec(FieldKind.INPUT, "name", fields["name"]),
                    ) + tuple(
                        FieldSpec(FieldKind.INPUT, key, fields[key], validate=False, nullify=True)
                        for key in optional
                    ),
                    path=parent_path,
                ),
            ),
            Operation.VIEW: ViewConfig(
                header=Header(key="name", path=parent_path),
                deck=DeckConfig(
                    url=UrlTemplate("{base}/v0/projects/{project_slug}/testbeds/{testbed_slug}", base),
                    cards=(
                        Card("Testbed Name", "name"),
                        Card("Testbed Slug", "slug"),
                    ),
                ),
            ),
        },
    )


def _branches(base: str) -> ResourceConfig:
    fields = field_configs.BRANCH_FIELDS
    return ResourceConfig(
        name="branches",
        slug_param="branch_slug",
        operations={
            Operation.LIST: ListConfig(
                header=Header(title="Branches", buttons=_list_buttons()),
                table=TableConfig(
                    url=UrlTemplate("{base}/v0/projects/{project_slug}/branches", base),
                    row=RowConfig(
                        key="name",
                        items=(RowItem(RowItemKind.TEXT, "slug"), RowItem(), RowItem(), RowItem()),
                        path=view_path,
                    ),
                ),
            ),
            Operation.ADD: AddConfig(
                header=Header(title="Add Branch", path=parent_path),
                form=FormConfig(
                    url=UrlTemplate("{base}/v0/branches", base),
                    fields=(
                        FieldSpec(
                            FieldKind.FIXED, "project", field_configs.PROJECT_FIELDS["slug"],
                            source="project_slug",
                        ),
                        FieldSpec(FieldKind.INPUT, "name", fields["name"]),
                        FieldSpec(FieldKind.INPUT, "slug", fields["slug"], validate=False, nullify=True),
                    ),
                    path=parent_path,
                ),
            ),
            Operation.VIEW: ViewConfig(
                header=Header(key="name", path=parent_path),
                deck=DeckConfig(
                    url=UrlTemplate("{base}/v0/projects/{project_slug}/branches/{branch_slug}", base),
                    cards=(
                        Card("Branch Name", "name"),
                        Card("Branch Slug", "slug"),
                    ),
                ),
            ),
        },
    )


def _reports(base: str) -> ResourceConfig:
    # Reports are created by the CLI, so the console only lists and views them
    return ResourceConfig(
        name="reports",
        slug_param="report_uuid",
        operations={
            Operation.LIST: ListConfig(
                header=Header(title="Reports", buttons=(Button(kind=ButtonKind.REFRESH),)),
                table=TableConfig(
                    url=UrlTemplate("{base}/v0/projects/{project_slug}/reports", base),
                    row=RowConfig(
                        key="start_time",
                        items=(
                            RowItem(RowItemKind.TEXT, "adapter"),
                            RowItem(RowItemKind.TEXT, "branch"),
                            RowItem(RowItemKind.TEXT, "testbed"),
                            RowItem(),
                        ),
                        path=lambda pathname, datum: view_path(pathname, datum, key="uuid"),
                    ),
                ),
            ),
            Operation.VIEW: ViewConfig(
                header=Header(key="start_time", path=parent_path),
                deck=DeckConfig(
                    url=UrlTemplate("{base}/v0/projects/{project_slug}/reports/{report_uuid}", base),
                    cards=(
                        Card("Report Start Time", "start_time"),
                        Card("Report End Time", "end_time"),
                        Card("Adapter", "adapter"),
                        Card("Branch", "branch"),
                        Card("Testbed", "testbed"),
                    ),
                ),
            ),
        },
    )


def build_default_registry(base_url: str) -> ResourceRegistry:
    """Construct the console's resources against the API at `base_url`."""
    return ResourceRegistry([
        _projects(base_url),
        _testbeds(base_url),
        _branches(base_url),
        _reports(base_url),
    ])

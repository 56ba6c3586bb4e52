"""
Per-resource field configuration tables.

Forms reference these entries from their FieldSpecs, so a field such as a
project slug is labelled and validated the same way everywhere.
"""
from __future__ import annotations

import re
from types import MappingProxyType
from urllib.parse import urlparse

from console.services.fields import FieldConfig, ValidationRule

SLUG_PATTERN = r"[a-z0-9]+(?:-[a-z0-9]+)*"
NAME_MAX_LENGTH = 50
SLUG_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 2048


def is_valid_slug(value: str) -> bool:
    return (
        isinstance(value, str)
        and 0 < len(value) <= SLUG_MAX_LENGTH
        and re.fullmatch(SLUG_PATTERN, value) is not None
    )


def is_valid_name(value: str) -> bool:
    if not isinstance(value, str):
        return False
    stripped = value.strip()
    return 0 < len(stripped) <= NAME_MAX_LENGTH and stripped == value


def is_valid_description(value: str) -> bool:
    return isinstance(value, str) and len(value) <= DESCRIPTION_MAX_LENGTH


def is_valid_url(value: str) -> bool:
    if not isinstance(value, str):
        return False
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


NAME_RULE = ValidationRule(required=True, predicate=is_valid_name)
SLUG_RULE = ValidationRule(required=True, predicate=is_valid_slug)
OPTIONAL_TEXT_RULE = ValidationRule(max_length=NAME_MAX_LENGTH)


PROJECT_FIELDS = MappingProxyType({
    "name": FieldConfig(
        label="Name",
        placeholder="Project Name",
        icon="fas fa-project-diagram",
        help="Must be non-empty and at most 50 characters",
        rule=NAME_RULE,
    ),
    "slug": FieldConfig(
        label="Project Slug",
        placeholder="project-slug",
        icon="fas fa-exclamation-triangle",
        help="Must be a valid slug",
        rule=SLUG_RULE,
    ),
    "description": FieldConfig(
        label="Description",
        type="textarea",
        placeholder="Describe the project",
        rule=ValidationRule(predicate=is_valid_description),
    ),
    "url": FieldConfig(
        label="URL",
        placeholder="www.example.com",
        icon="fas fa-link",
        help="Must be a valid public URL",
        rule=ValidationRule(predicate=is_valid_url),
    ),
    "public": FieldConfig(
        label="Public Project",
        type="checkbox",
    ),
})


TESTBED_FIELDS = MappingProxyType({
    "name": FieldConfig(
        label="Name",
        placeholder="Testbed Name",
        icon="fas fa-server",
        help="Must be non-empty and at most 50 characters",
        rule=NAME_RULE,
    ),
    "slug": FieldConfig(
        label="Testbed Slug",
        placeholder="testbed-slug",
        rule=SLUG_RULE,
    ),
    "os_name": FieldConfig(label="Operating System", placeholder="Linux", rule=OPTIONAL_TEXT_RULE),
    "os_version": FieldConfig(label="OS Version", placeholder="5.17.1", rule=OPTIONAL_TEXT_RULE),
    "runtime_name": FieldConfig(label="Runtime", placeholder="rustc", rule=OPTIONAL_TEXT_RULE),
    "runtime_version": FieldConfig(label="Runtime Version", placeholder="1.62.0", rule=OPTIONAL_TEXT_RULE),
    "cpu": FieldConfig(label="CPU", placeholder="Intel Core i7", rule=OPTIONAL_TEXT_RULE),
    "ram": FieldConfig(label="RAM", placeholder="16GB", rule=OPTIONAL_TEXT_RULE),
    "disk": FieldConfig(label="Disk", placeholder="1TB", rule=OPTIONAL_TEXT_RULE),
})


BRANCH_FIELDS = MappingProxyType({
    "name": FieldConfig(
        label="Name",
        placeholder="Branch Name",
        icon="fas fa-code-branch",
        help="Must be non-empty and at most 50 characters",
        rule=NAME_RULE,
    ),
    "slug": FieldConfig(
        label="Branch Slug",
        placeholder="branch-slug",
        rule=SLUG_RULE,
    ),
})

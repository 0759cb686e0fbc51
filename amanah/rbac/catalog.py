# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Registry of valid (resource, action) combinations."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from amanah.exceptions import CatalogValidationError
from amanah.rbac.permissions import (
    PERMISSION_RESOURCES,
    UI_SPECIFIC_RESOURCES,
    UNIVERSAL_CRUD_ACTIONS,
)


@dataclass(frozen=True)
class ActionDescriptor:
    """A single action that can be granted on a resource."""

    name: str
    label: str
    description: str


@dataclass(frozen=True)
class ResourceDescriptor:
    """A protected resource and the actions declared for it."""

    name: str
    label: str
    description: str
    category: str
    actions: tuple[ActionDescriptor, ...] = ()


def _to_action(data: Mapping[str, Any]) -> ActionDescriptor:
    return ActionDescriptor(
        name=data["name"], label=data["label"], description=data["description"]
    )


class PermissionCatalog:
    """Read-only registry of resources and their effective actions.

    Every resource implicitly supports the universal CRUD actions except
    the UI-specific resources, whose action set is exactly what they
    declare.
    """

    def __init__(
        self,
        resources: Iterable[Mapping[str, Any]] = PERMISSION_RESOURCES,
        universal_actions: Iterable[Mapping[str, Any]] = UNIVERSAL_CRUD_ACTIONS,
        ui_specific: Iterable[str] = UI_SPECIFIC_RESOURCES,
    ) -> None:
        self._resources: dict[str, ResourceDescriptor] = {}
        for data in resources:
            if data["name"] in self._resources:
                raise ValueError(f"Duplicate resource in catalog: {data['name']}")
            self._resources[data["name"]] = ResourceDescriptor(
                name=data["name"],
                label=data["label"],
                description=data["description"],
                category=data["category"],
                actions=tuple(_to_action(a) for a in data.get("actions", [])),
            )
        self._universal = tuple(_to_action(a) for a in universal_actions)
        self._ui_specific = frozenset(ui_specific)
        self._effective: dict[str, tuple[ActionDescriptor, ...]] = {
            name: self._merge_actions(resource)
            for name, resource in self._resources.items()
        }

    def _merge_actions(
        self, resource: ResourceDescriptor
    ) -> tuple[ActionDescriptor, ...]:
        if resource.name in self._ui_specific:
            candidates = resource.actions
        else:
            candidates = resource.actions + self._universal

        seen: set[str] = set()
        merged: list[ActionDescriptor] = []
        for action in candidates:
            if action.name in seen:
                continue
            seen.add(action.name)
            merged.append(action)
        return tuple(merged)

    @property
    def universal_actions(self) -> tuple[ActionDescriptor, ...]:
        return self._universal

    def list_resources(self) -> list[ResourceDescriptor]:
        """Return all resources in declaration order."""
        return list(self._resources.values())

    def get_resource(self, resource: str) -> ResourceDescriptor | None:
        return self._resources.get(resource)

    def list_actions(self, resource: str) -> list[ActionDescriptor]:
        """Return the effective actions for a resource.

        Declared actions come first; universal actions follow unless the
        resource is UI-specific. Unknown resources yield an empty list.
        """
        return list(self._effective.get(resource, ()))

    def is_valid_resource(self, resource: str) -> bool:
        return resource in self._resources

    def is_valid_permission(self, resource: str, action: str) -> bool:
        """Check that the action belongs to the resource's effective set."""
        return any(a.name == action for a in self._effective.get(resource, ()))

    def validate_permission(self, resource: str, action: str) -> None:
        """Raise CatalogValidationError unless the pair is in the catalog."""
        if not self.is_valid_resource(resource):
            raise CatalogValidationError(f"Unknown resource '{resource}'")
        if not self.is_valid_permission(resource, action):
            allowed = ", ".join(a.name for a in self._effective[resource])
            raise CatalogValidationError(
                f"Action '{action}' is not valid for resource '{resource}' "
                f"(allowed: {allowed})"
            )

    def get_permission_description(self, resource: str, action: str) -> str:
        """Human readable description of a resource/action pair."""
        descriptor = self._resources.get(resource)
        if descriptor:
            for specific in descriptor.actions:
                if specific.name == action:
                    return specific.description

        for universal in self._universal:
            if universal.name == action:
                label = descriptor.label if descriptor else resource
                return f"{universal.description} for {label}"

        return f"{action} permission for {resource}"

    def list_categories(self) -> list[str]:
        return sorted({r.category for r in self._resources.values()})

    def resources_by_category(self) -> dict[str, list[ResourceDescriptor]]:
        grouped: dict[str, list[ResourceDescriptor]] = {}
        for resource in self._resources.values():
            grouped.setdefault(resource.category, []).append(resource)
        return grouped

    def all_permissions(self) -> list[tuple[str, str]]:
        """Every effective (resource, action) pair in catalog order."""
        return [
            (name, action.name)
            for name, actions in self._effective.items()
            for action in actions
        ]


# Process-wide catalog, built once at import time
catalog = PermissionCatalog()

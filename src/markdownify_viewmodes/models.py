"""Data models for entities, bundles and languages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

# Namespace under which this package stores its settings on other config objects
MODULE_NAMESPACE = "markdownify_viewmodes"

# Name of the converter's global settings object
SETTINGS_NAME = "markdownify.settings"

# View mode used when nothing else is configured; assumed to always exist
FALLBACK_VIEW_MODE = "full"

# View mode every bundle has, whether or not custom displays are enabled
DEFAULT_VIEW_MODE = "default"

# Language code for content that is not tied to a particular language
LANGCODE_NOT_SPECIFIED = "und"


class Entity(Protocol):
    """Anything that can be rendered: identified by entity type, bundle and id."""

    @property
    def entity_type_id(self) -> str: ...

    @property
    def bundle(self) -> str: ...

    @property
    def id(self) -> int | str | None: ...


@dataclass(frozen=True)
class ContentEntity:
    """A concrete content item such as a node, term or user."""

    entity_type_id: str
    bundle: str
    id: int | str | None = None
    label: str = ""


@dataclass
class BundleEntity:
    """The configuration record of a bundle (e.g. the "article" node type).

    Third-party settings are namespaced by module name so that extensions can
    attach their own settings without changing the bundle's schema.
    """

    id: str
    entity_type_id: str
    label: str = ""
    third_party_settings: dict[str, dict[str, Any]] = field(
        default_factory=dict[str, dict[str, Any]]
    )

    def get_third_party_setting(self, module: str, key: str, default: Any = None) -> Any:
        """Return a namespaced setting, or ``default`` when it is not set."""
        return self.third_party_settings.get(module, {}).get(key, default)

    def set_third_party_setting(self, module: str, key: str, value: Any) -> None:
        """Store a namespaced setting."""
        self.third_party_settings.setdefault(module, {})[key] = value


@dataclass(frozen=True)
class EntityTypeDefinition:
    """Definition of an entity type.

    ``bundle_entity_type`` names the entity type holding this type's bundle
    records; it is None for bundle-less entity types.
    """

    id: str
    label: str = ""
    bundle_entity_type: str | None = None


@dataclass(frozen=True)
class Language:
    """A site language."""

    id: str
    name: str = ""


@dataclass(frozen=True)
class PathAlias:
    """A human-readable alias for a system path in one language."""

    path: str
    alias: str
    langcode: str = LANGCODE_NOT_SPECIFIED

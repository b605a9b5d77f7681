"""Protocol definitions for the services the resolver and middleware depend on."""

from typing import Any, Protocol

from .models import BundleEntity, EntityTypeDefinition, Language, PathAlias


class ImmutableConfig(Protocol):
    """A read-only configuration object."""

    def get(self, key: str) -> Any:
        """Read a value by dotted key.

        Args:
            key: Dotted path such as ``third_party_settings.module.key``

        Returns:
            The stored value, or None if any part of the path is missing
        """
        ...


class ConfigFactory(Protocol):
    """Provides named configuration objects."""

    def get(self, name: str) -> ImmutableConfig:
        """Return the configuration object with the given name (empty if unknown)."""
        ...


class EntityStorage(Protocol):
    """Loads configuration entities of one entity type."""

    def load(self, entity_id: str) -> BundleEntity | None:
        """Load an entity by ID, returning None when it does not exist."""
        ...


class EntityTypeManager(Protocol):
    """Entity type definitions and their storage handlers."""

    def get_definition(self, entity_type_id: str) -> EntityTypeDefinition:
        """Return an entity type definition.

        Raises:
            EntityTypeNotFoundError: If the entity type does not exist
        """
        ...

    def get_storage(self, entity_type_id: str) -> EntityStorage:
        """Return the storage handler for an entity type.

        Raises:
            StorageNotFoundError: If the entity type has no storage
        """
        ...


class EntityDisplayRepository(Protocol):
    """Enumerates the view modes configured for a bundle."""

    def get_view_mode_options_by_bundle(self, entity_type_id: str, bundle: str) -> dict[str, str]:
        """Return the view modes available for a bundle.

        Returns:
            Mapping of view mode ID to human-readable label

        Raises:
            EntityTypeNotFoundError: If the entity type does not exist
        """
        ...


class AliasRepository(Protocol):
    """Looks up path aliases."""

    def lookup_by_system_path(self, path: str, langcode: str) -> PathAlias | None:
        """Return the alias of a system path in a language, if one exists."""
        ...


class LanguageManager(Protocol):
    """Determines the language of the current request."""

    def get_current_language(self, request: Any = None) -> Language:
        """Return the negotiated language for a request (or the site default)."""
        ...

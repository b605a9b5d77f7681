"""Custom exceptions for markdownify-viewmodes."""


class MarkdownifyViewModesError(Exception):
    """Base exception for all markdownify-viewmodes errors."""

    pass


class ConfigError(MarkdownifyViewModesError, ValueError):
    """Raised when the site configuration is missing or invalid."""

    pass


class EntityTypeNotFoundError(MarkdownifyViewModesError):
    """Raised when an entity type ID has no definition."""

    def __init__(self, entity_type_id: str) -> None:
        super().__init__(f'The "{entity_type_id}" entity type does not exist.')
        self.entity_type_id = entity_type_id


class StorageNotFoundError(EntityTypeNotFoundError):
    """Raised when no storage handler exists for an entity type."""

    pass

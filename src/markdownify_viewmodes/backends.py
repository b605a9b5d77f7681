"""In-memory implementations of the collaborator protocols, built from a SiteConfig."""

from __future__ import annotations

from typing import Any

from .config import SiteConfig
from .exceptions import EntityTypeNotFoundError, StorageNotFoundError
from .models import (
    LANGCODE_NOT_SPECIFIED,
    BundleEntity,
    EntityTypeDefinition,
    Language,
    PathAlias,
)


class DictConfig:
    """Read-only configuration object addressed by dotted keys."""

    def __init__(self, data: dict[str, Any]) -> None:
        self._data = data

    def get(self, key: str = "") -> Any:
        """Read a value by dotted key; an empty key returns all data."""
        if not key:
            return self._data
        value: Any = self._data
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return None
            value = value[part]  # pyright: ignore[reportUnknownVariableType]
        return value  # pyright: ignore[reportUnknownVariableType]


class SiteConfigFactory:
    """Config factory serving named configuration objects from a SiteConfig."""

    def __init__(self, site_config: SiteConfig) -> None:
        self._site_config = site_config

    def get(self, name: str) -> DictConfig:
        return DictConfig(self._site_config.settings_data(name))


class BundleStorage:
    """Storage for the bundle records of one entity type."""

    def __init__(self, bundle_entity_type: str, bundles: dict[str, BundleEntity]) -> None:
        self.bundle_entity_type = bundle_entity_type
        self._bundles = bundles

    def load(self, entity_id: str) -> BundleEntity | None:
        return self._bundles.get(entity_id)


class SiteEntityTypeManager:
    """Entity type definitions and bundle storage from a SiteConfig."""

    def __init__(self, site_config: SiteConfig) -> None:
        self._definitions: dict[str, EntityTypeDefinition] = {}
        self._storages: dict[str, BundleStorage] = {}

        for entity_type_id, entity_type in site_config.entity_types.items():
            self._definitions[entity_type_id] = EntityTypeDefinition(
                id=entity_type_id,
                label=entity_type.label,
                bundle_entity_type=entity_type.bundle_entity_type,
            )
            if entity_type.bundle_entity_type is None:
                continue
            bundles = {
                bundle_id: BundleEntity(
                    id=bundle_id,
                    entity_type_id=entity_type.bundle_entity_type,
                    label=bundle.label,
                    third_party_settings={
                        module: dict(settings)
                        for module, settings in bundle.third_party_settings.items()
                    },
                )
                for bundle_id, bundle in entity_type.bundles.items()
            }
            self._storages[entity_type.bundle_entity_type] = BundleStorage(
                entity_type.bundle_entity_type, bundles
            )

    def get_definition(self, entity_type_id: str) -> EntityTypeDefinition:
        try:
            return self._definitions[entity_type_id]
        except KeyError:
            raise EntityTypeNotFoundError(entity_type_id) from None

    def get_storage(self, entity_type_id: str) -> BundleStorage:
        try:
            return self._storages[entity_type_id]
        except KeyError:
            raise StorageNotFoundError(entity_type_id) from None


class SiteEntityDisplayRepository:
    """View mode enumeration from a SiteConfig."""

    def __init__(self, site_config: SiteConfig) -> None:
        self._site_config = site_config

    def get_view_mode_options_by_bundle(self, entity_type_id: str, bundle: str) -> dict[str, str]:
        try:
            return self._site_config.view_mode_options(entity_type_id, bundle)
        except KeyError:
            raise EntityTypeNotFoundError(entity_type_id) from None


def _normalize_path(path: str) -> str:
    return path if path.startswith("/") else f"/{path}"


class SiteAliasRepository:
    """Path alias lookup over an ordered list of aliases.

    Aliases in the requested language win over language-neutral ones; among
    equally good matches the one added last wins.
    """

    def __init__(self, aliases: list[PathAlias] | None = None) -> None:
        self._aliases: list[PathAlias] = []
        for alias in aliases or []:
            self.add(alias)

    @classmethod
    def from_config(cls, site_config: SiteConfig) -> SiteAliasRepository:
        return cls([entry.to_alias() for entry in site_config.path_aliases])

    def add(self, alias: PathAlias) -> None:
        self._aliases.append(
            PathAlias(
                path=_normalize_path(alias.path),
                alias=_normalize_path(alias.alias),
                langcode=alias.langcode,
            )
        )

    def lookup_by_system_path(self, path: str, langcode: str) -> PathAlias | None:
        path = _normalize_path(path)
        neutral: PathAlias | None = None
        for alias in reversed(self._aliases):
            if alias.path != path:
                continue
            if alias.langcode == langcode:
                return alias
            if neutral is None and alias.langcode == LANGCODE_NOT_SPECIFIED:
                neutral = alias
        return neutral


class SiteLanguageManager:
    """Language negotiation against the site's enabled languages.

    Order: ``request.state.langcode``, then the first enabled language in the
    Accept-Language header, then the site default.
    """

    def __init__(
        self,
        default_langcode: str = "en",
        enabled: list[str] | None = None,
        names: dict[str, str] | None = None,
    ) -> None:
        self.default_langcode = default_langcode
        self.enabled = list(enabled) if enabled else [default_langcode]
        self._names = names or {}

    @classmethod
    def from_config(cls, site_config: SiteConfig) -> SiteLanguageManager:
        languages = site_config.languages
        return cls(languages.default, languages.enabled, languages.names)

    def get_language(self, langcode: str) -> Language:
        return Language(id=langcode, name=self._names.get(langcode, langcode))

    def get_current_language(self, request: Any = None) -> Language:
        if request is not None:
            state = getattr(request, "state", None)
            langcode = getattr(state, "langcode", None) if state is not None else None
            if langcode in self.enabled:
                return self.get_language(langcode)

            headers = getattr(request, "headers", None)
            accept = headers.get("accept-language") if headers is not None else None
            if accept:
                # Tags are case-insensitive; answer with the configured spelling
                enabled = {code.lower(): code for code in self.enabled}
                for candidate in _parse_accept_language(accept):
                    if candidate in enabled:
                        return self.get_language(enabled[candidate])
                    primary = candidate.split("-")[0]
                    if primary in enabled:
                        return self.get_language(enabled[primary])

        return self.get_language(self.default_langcode)


def _parse_accept_language(header: str) -> list[str]:
    """Return language tags from an Accept-Language header, best first."""
    weighted: list[tuple[float, int, str]] = []
    for index, part in enumerate(header.split(",")):
        pieces = [piece.strip() for piece in part.split(";")]
        tag = pieces[0].lower()
        if not tag or tag == "*":
            continue
        quality = 1.0
        for param in pieces[1:]:
            if param.startswith("q="):
                try:
                    quality = float(param[2:])
                except ValueError:
                    quality = 0.0
        if quality > 0:
            weighted.append((-quality, index, tag))
    return [tag for _, _, tag in sorted(weighted)]

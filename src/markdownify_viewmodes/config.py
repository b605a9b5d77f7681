"""Site configuration loader.

A single YAML file (markdownify_viewmodes.yaml) describes everything the
resolver and the canonical-link middleware read: the converter's global
settings, the entity types with their bundles and view modes, the site
languages and the path aliases.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from . import context
from .exceptions import ConfigError
from .models import (
    DEFAULT_VIEW_MODE,
    LANGCODE_NOT_SPECIFIED,
    MODULE_NAMESPACE,
    SETTINGS_NAME,
    PathAlias,
)

DEFAULT_CONFIG_FILENAME = "markdownify_viewmodes.yaml"
CONFIG_ENV_VAR = "MARKDOWNIFY_VIEWMODES_CONFIG"


class ViewModeSettings(BaseModel):
    """This package's per-bundle settings (a third-party setting on the bundle)."""

    enable_override: bool = False
    view_mode: str | None = None


class BundleConfig(BaseModel):
    """Configuration of a single bundle."""

    label: str = ""
    view_modes: list[str] = Field(default_factory=list)  # Enabled custom displays
    third_party_settings: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_own_settings(self) -> BundleConfig:
        """Validate and normalize the settings in this package's namespace."""
        if MODULE_NAMESPACE in self.third_party_settings:
            settings = ViewModeSettings.model_validate(self.third_party_settings[MODULE_NAMESPACE])
            self.third_party_settings[MODULE_NAMESPACE] = settings.model_dump()
        return self

    @property
    def view_mode_settings(self) -> ViewModeSettings:
        """The bundle's override settings (defaults when not configured)."""
        return ViewModeSettings.model_validate(
            self.third_party_settings.get(MODULE_NAMESPACE, {})
        )


class EntityTypeConfig(BaseModel):
    """Configuration of an entity type and its bundles."""

    label: str = ""
    bundle_entity_type: str | None = None  # None = bundle-less entity type
    bundles: dict[str, BundleConfig] = Field(default_factory=dict)


class MarkdownifySettings(BaseModel):
    """The Markdown converter's global settings object."""

    third_party_settings: dict[str, dict[str, Any]] = Field(default_factory=dict)

    def entity_type_view_modes(self) -> dict[str, str]:
        """Get the entity type -> default view mode mapping."""
        own = self.third_party_settings.get(MODULE_NAMESPACE, {})
        mapping: dict[str, str] = own.get("entity_types") or {}
        return dict(mapping)


class LanguagesConfig(BaseModel):
    """Site languages."""

    default: str = "en"
    enabled: list[str] = Field(default_factory=lambda: ["en"])
    names: dict[str, str] = Field(default_factory=dict)  # langcode -> display name

    @model_validator(mode="after")
    def validate_default_enabled(self) -> LanguagesConfig:
        """Ensure the default language is one of the enabled languages."""
        if self.default not in self.enabled:
            raise ValueError(
                f"languages.default '{self.default}' must be listed in languages.enabled"
            )
        return self


class PathAliasConfig(BaseModel):
    """A path alias entry."""

    path: str
    alias: str
    langcode: str = LANGCODE_NOT_SPECIFIED

    def to_alias(self) -> PathAlias:
        """Convert to the runtime PathAlias model."""
        return PathAlias(path=self.path, alias=self.alias, langcode=self.langcode)


class SiteConfig(BaseModel):
    """Everything the resolver and middleware read from configuration."""

    markdownify: MarkdownifySettings = Field(default_factory=MarkdownifySettings)
    entity_types: dict[str, EntityTypeConfig] = Field(default_factory=dict)
    languages: LanguagesConfig = Field(default_factory=LanguagesConfig)
    path_aliases: list[PathAliasConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_alias_languages(self) -> SiteConfig:
        """Ensure every alias is for an enabled language or language-neutral."""
        allowed = set(self.languages.enabled) | {LANGCODE_NOT_SPECIFIED}
        for entry in self.path_aliases:
            if entry.langcode not in allowed:
                raise ValueError(
                    f"Path alias '{entry.alias}' uses language '{entry.langcode}', "
                    f"which is not enabled"
                )
        return self

    def settings_data(self, name: str) -> dict[str, Any]:
        """Get the raw data of a named configuration object."""
        if name == SETTINGS_NAME:
            return self.markdownify.model_dump()
        return {}

    def view_mode_options(self, entity_type_id: str, bundle: str) -> dict[str, str]:
        """Get the view mode options for a bundle, including the default display.

        Raises:
            KeyError: If the entity type is not configured
        """
        entity_type = self.entity_types[entity_type_id]
        options = {DEFAULT_VIEW_MODE: "Default"}
        bundle_config = entity_type.bundles.get(bundle)
        if bundle_config is not None:
            for view_mode in bundle_config.view_modes:
                options[view_mode] = view_mode.replace("_", " ").title()
        return options


def load_site_config(config_path: Path | str) -> SiteConfig:
    """Load the site configuration from a YAML file.

    Args:
        config_path: Path to the YAML file

    Returns:
        The validated SiteConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If config is empty or invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open() as f:
        try:
            data: dict[str, Any] | None = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not data:
        raise ConfigError("Empty configuration file")

    if not isinstance(data, dict):
        raise ConfigError("Configuration file must contain a mapping")

    try:
        return SiteConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}:\n{e}") from e


def discover_config(config_path: Path | None = None) -> SiteConfig | None:
    """Discover the site config from various locations.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. MARKDOWNIFY_VIEWMODES_CONFIG environment variable
    4. Current directory / markdownify_viewmodes.yaml

    Raises:
        FileNotFoundError: If an explicitly requested file does not exist
    """
    if config_path is not None:
        return load_site_config(config_path)

    ctx_config = context.get_config_path()
    if ctx_config is not None:
        return load_site_config(ctx_config)

    env_config = os.environ.get(CONFIG_ENV_VAR)
    if env_config:
        return load_site_config(env_config)

    cwd_config = Path(DEFAULT_CONFIG_FILENAME)
    if cwd_config.exists():
        return load_site_config(cwd_config)

    return None

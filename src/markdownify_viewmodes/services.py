"""Service wiring: builds the resolver and responder from a site configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .backends import (
    SiteAliasRepository,
    SiteConfigFactory,
    SiteEntityDisplayRepository,
    SiteEntityTypeManager,
    SiteLanguageManager,
)
from .canonical import CanonicalLinkResponder
from .config import SiteConfig
from .resolver import ViewModeResolver


@dataclass
class Services:
    """The package's services and the collaborators they were built with."""

    site_config: SiteConfig
    config_factory: SiteConfigFactory
    entity_type_manager: SiteEntityTypeManager
    entity_display_repository: SiteEntityDisplayRepository
    alias_repository: SiteAliasRepository
    language_manager: SiteLanguageManager
    resolver: ViewModeResolver
    canonical_link: CanonicalLinkResponder

    @classmethod
    def from_config(cls, site_config: SiteConfig, logger: logging.Logger | None = None) -> Services:
        """Wire the in-memory backends for a site configuration."""
        config_factory = SiteConfigFactory(site_config)
        entity_type_manager = SiteEntityTypeManager(site_config)
        entity_display_repository = SiteEntityDisplayRepository(site_config)
        alias_repository = SiteAliasRepository.from_config(site_config)
        language_manager = SiteLanguageManager.from_config(site_config)
        return cls(
            site_config=site_config,
            config_factory=config_factory,
            entity_type_manager=entity_type_manager,
            entity_display_repository=entity_display_repository,
            alias_repository=alias_repository,
            language_manager=language_manager,
            resolver=ViewModeResolver(
                config_factory, entity_type_manager, entity_display_repository, logger=logger
            ),
            canonical_link=CanonicalLinkResponder(alias_repository, language_manager),
        )

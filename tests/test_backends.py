"""Tests for the in-memory collaborators built from a site config."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from markdownify_viewmodes.backends import (
    DictConfig,
    SiteAliasRepository,
    SiteConfigFactory,
    SiteEntityDisplayRepository,
    SiteEntityTypeManager,
    SiteLanguageManager,
)
from markdownify_viewmodes.config import SiteConfig
from markdownify_viewmodes.exceptions import EntityTypeNotFoundError, StorageNotFoundError
from markdownify_viewmodes.models import PathAlias


class TestDictConfig:
    """Tests for dotted-key configuration reads."""

    def test_nested_get(self) -> None:
        """Test reading nested values and missing keys."""
        config = DictConfig({"a": {"b": {"c": "teaser"}}, "flag": False})

        assert config.get("a.b.c") == "teaser"
        assert config.get("a.b") == {"c": "teaser"}
        assert config.get("flag") is False
        assert config.get("a.missing.c") is None
        assert config.get("a.b.c.d") is None
        assert config.get() == {"a": {"b": {"c": "teaser"}}, "flag": False}

    def test_config_factory(self, site_config: SiteConfig) -> None:
        """Test that unknown config names are empty."""
        factory = SiteConfigFactory(site_config)

        settings = factory.get("markdownify.settings")
        assert settings.get("third_party_settings.markdownify_viewmodes.entity_types.node") == (
            "teaser"
        )
        assert factory.get("system.site").get("name") is None


class TestEntityTypeManager:
    """Tests for SiteEntityTypeManager."""

    def test_definitions(self, site_config: SiteConfig) -> None:
        """Test entity type definitions."""
        manager = SiteEntityTypeManager(site_config)

        assert manager.get_definition("node").bundle_entity_type == "node_type"
        assert manager.get_definition("user").bundle_entity_type is None
        with pytest.raises(EntityTypeNotFoundError, match='"media" entity type does not exist'):
            manager.get_definition("media")

    def test_bundle_storage(self, site_config: SiteConfig) -> None:
        """Test loading bundle records with their third-party settings."""
        manager = SiteEntityTypeManager(site_config)
        storage = manager.get_storage("node_type")

        article = storage.load("article")
        assert article is not None
        assert article.entity_type_id == "node_type"
        assert article.label == "Article"
        assert article.get_third_party_setting("markdownify_viewmodes", "view_mode") == "markdown"
        assert article.get_third_party_setting("markdownify_viewmodes", "missing", "x") == "x"
        assert storage.load("missing") is None

    def test_bundle_records_are_copies(self, site_config: SiteConfig) -> None:
        """Test that changing a loaded record does not change the site config."""
        manager = SiteEntityTypeManager(site_config)
        article = manager.get_storage("node_type").load("article")
        assert article is not None

        article.set_third_party_setting("markdownify_viewmodes", "view_mode", "teaser")

        bundle = site_config.entity_types["node"].bundles["article"]
        assert bundle.view_mode_settings.view_mode == "markdown"

    def test_no_storage_for_bundle_less_types(self, site_config: SiteConfig) -> None:
        """Test that unknown storages raise."""
        manager = SiteEntityTypeManager(site_config)

        with pytest.raises(StorageNotFoundError):
            manager.get_storage("user_type")


class TestEntityDisplayRepository:
    """Tests for SiteEntityDisplayRepository."""

    def test_options(self, site_config: SiteConfig) -> None:
        """Test view mode options per bundle."""
        repository = SiteEntityDisplayRepository(site_config)

        assert repository.get_view_mode_options_by_bundle("node", "page") == {
            "default": "Default",
            "full": "Full",
            "teaser": "Teaser",
        }
        with pytest.raises(EntityTypeNotFoundError):
            repository.get_view_mode_options_by_bundle("media", "image")


class TestAliasRepository:
    """Tests for SiteAliasRepository."""

    def test_language_specific_alias(self, site_config: SiteConfig) -> None:
        """Test lookups per language."""
        repository = SiteAliasRepository.from_config(site_config)

        en = repository.lookup_by_system_path("/node/42", "en")
        fr = repository.lookup_by_system_path("/node/42", "fr")
        assert en is not None and en.alias == "/my-article"
        assert fr is not None and fr.alias == "/mon-article"
        assert repository.lookup_by_system_path("/node/1", "en") is None

    def test_language_neutral_fallback(self) -> None:
        """Test that a language-neutral alias is used when no exact match exists."""
        repository = SiteAliasRepository(
            [
                PathAlias("/node/7", "/about"),
                PathAlias("/node/7", "/a-propos", "fr"),
            ]
        )

        en = repository.lookup_by_system_path("/node/7", "en")
        fr = repository.lookup_by_system_path("/node/7", "fr")
        assert en is not None and en.alias == "/about"
        assert fr is not None and fr.alias == "/a-propos"

    def test_latest_alias_wins(self) -> None:
        """Test that the most recently added alias wins."""
        repository = SiteAliasRepository([PathAlias("/node/1", "/old", "en")])
        repository.add(PathAlias("/node/1", "/new", "en"))

        alias = repository.lookup_by_system_path("/node/1", "en")
        assert alias is not None and alias.alias == "/new"

    def test_leading_slash_normalized(self) -> None:
        """Test that paths without a leading slash match."""
        repository = SiteAliasRepository([PathAlias("node/3", "contact", "en")])

        alias = repository.lookup_by_system_path("node/3", "en")
        assert alias is not None
        assert alias.path == "/node/3"
        assert alias.alias == "/contact"


class TestLanguageManager:
    """Tests for SiteLanguageManager negotiation."""

    @pytest.fixture
    def manager(self) -> SiteLanguageManager:
        return SiteLanguageManager("en", ["en", "fr", "pt-br"], {"fr": "French"})

    def test_default_without_request(self, manager: SiteLanguageManager) -> None:
        """Test that the site default is used outside a request."""
        language = manager.get_current_language()
        assert language.id == "en"
        assert language.name == "en"

    def test_request_state_langcode(self, manager: SiteLanguageManager) -> None:
        """Test that an explicit langcode on the request state wins."""
        request = SimpleNamespace(
            state=SimpleNamespace(langcode="fr"), headers={"accept-language": "pt-BR"}
        )

        language = manager.get_current_language(request)
        assert language.id == "fr"
        assert language.name == "French"

    def test_accept_language(self, manager: SiteLanguageManager) -> None:
        """Test Accept-Language negotiation with quality values."""

        def negotiate(header: str) -> str:
            request = SimpleNamespace(state=SimpleNamespace(), headers={"accept-language": header})
            return manager.get_current_language(request).id

        assert negotiate("fr") == "fr"
        assert negotiate("de, fr;q=0.8, en;q=0.9") == "en"
        assert negotiate("pt-BR,pt;q=0.9") == "pt-br"
        assert negotiate("fr-CA") == "fr"
        assert negotiate("de, ja") == "en"
        assert negotiate("fr;q=0, *") == "en"

    def test_accept_language_case_insensitive(self) -> None:
        """Test that mixed-case langcodes are negotiated and keep their spelling."""
        manager = SiteLanguageManager("en", ["en", "pt-BR", "zh-Hans"])

        def negotiate(header: str) -> str:
            request = SimpleNamespace(state=SimpleNamespace(), headers={"accept-language": header})
            return manager.get_current_language(request).id

        assert negotiate("pt-BR") == "pt-BR"
        assert negotiate("pt-br,en;q=0.5") == "pt-BR"
        assert negotiate("zh-hans-CN, zh-Hans;q=0.9") == "zh-Hans"
        assert negotiate("PT-BR") == "pt-BR"

    def test_from_config(self, site_config: SiteConfig) -> None:
        """Test building the manager from a site config."""
        manager = SiteLanguageManager.from_config(site_config)

        assert manager.default_langcode == "en"
        assert manager.enabled == ["en", "fr"]

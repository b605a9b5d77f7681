"""Pytest configuration and fixtures for markdownify-viewmodes tests."""

from __future__ import annotations

import copy
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

from markdownify_viewmodes import context
from markdownify_viewmodes.config import SiteConfig
from markdownify_viewmodes.logger import reset_logger
from markdownify_viewmodes.services import Services

SITE_DATA: dict[str, Any] = {
    "markdownify": {
        "third_party_settings": {
            "markdownify_viewmodes": {
                "entity_types": {"node": "teaser"},
            }
        }
    },
    "entity_types": {
        "node": {
            "label": "Content",
            "bundle_entity_type": "node_type",
            "bundles": {
                "article": {
                    "label": "Article",
                    "view_modes": ["full", "teaser", "markdown"],
                    "third_party_settings": {
                        "markdownify_viewmodes": {
                            "enable_override": True,
                            "view_mode": "markdown",
                        }
                    },
                },
                "page": {"label": "Basic page", "view_modes": ["full", "teaser"]},
                "landing": {"label": "Landing page", "view_modes": ["full"]},
            },
        },
        "user": {
            "label": "User",
            "bundle_entity_type": None,
            "bundles": {"user": {"view_modes": ["full", "compact"]}},
        },
    },
    "languages": {"default": "en", "enabled": ["en", "fr"]},
    "path_aliases": [
        {"path": "/node/42", "alias": "/my-article", "langcode": "en"},
        {"path": "/node/42", "alias": "/mon-article", "langcode": "fr"},
    ],
}


@pytest.fixture(autouse=True)
def clean_state() -> None:
    """Reset the logger and global context before each test for isolation."""
    reset_logger()
    context.reset()


@pytest.fixture
def site_data() -> dict[str, Any]:
    """A fresh copy of the example site data, safe to modify."""
    return copy.deepcopy(SITE_DATA)


@pytest.fixture
def site_config(site_data: dict[str, Any]) -> SiteConfig:
    """The example site configuration."""
    return SiteConfig.model_validate(site_data)


@pytest.fixture
def services(site_config: SiteConfig) -> Services:
    """Services wired from the example site configuration."""
    return Services.from_config(site_config)


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[dict[str, Any]], Path]:
    """Factory writing site data to a YAML file and returning its path."""

    def _write(data: dict[str, Any]) -> Path:
        path = tmp_path / "markdownify_viewmodes.yaml"
        path.write_text(yaml.safe_dump(data, sort_keys=False))
        return path

    return _write

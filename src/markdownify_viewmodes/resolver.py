"""View mode resolution for Markdown rendering.

The view mode for an entity is chosen in order:

1. The bundle's own override, if enabled on the bundle record
2. The entity-type default from the converter's global settings
3. The fallback ``"full"``

Every configured candidate is checked against the view modes actually
available for the entity's bundle before it is used. Invalid candidates are
logged and skipped. Resolution never raises.
"""

from __future__ import annotations

import logging

from .logger import ViewModesLogger, get_logger
from .models import (
    FALLBACK_VIEW_MODE,
    MODULE_NAMESPACE,
    SETTINGS_NAME,
    BundleEntity,
    Entity,
)
from .protocols import ConfigFactory, EntityDisplayRepository, EntityTypeManager


class ViewModeResolver:
    """Resolves the view mode used to render an entity as Markdown."""

    def __init__(
        self,
        config_factory: ConfigFactory,
        entity_type_manager: EntityTypeManager,
        entity_display_repository: EntityDisplayRepository,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config_factory = config_factory
        self.entity_type_manager = entity_type_manager
        self.entity_display_repository = entity_display_repository
        self.logger: logging.Logger = logger if logger is not None else get_logger()

    def get_view_mode(self, entity: Entity) -> str:
        """Resolve the view mode for an entity.

        Args:
            entity: The entity being rendered

        Returns:
            A view mode valid for the entity's bundle, or "full"
        """
        entity_type_id = entity.entity_type_id
        bundle = entity.bundle

        bundle_view_mode = self.get_bundle_view_mode(entity_type_id, bundle)
        if bundle_view_mode is not None:
            if self.validate_view_mode(entity_type_id, bundle, bundle_view_mode):
                self._checks(
                    "Using bundle override '%s' for %s/%s", bundle_view_mode, entity_type_id, bundle
                )
                return bundle_view_mode
            self.logger.warning(
                'Invalid view mode "%s" configured for %s/%s',
                bundle_view_mode,
                entity_type_id,
                bundle,
                extra={
                    "view_mode": bundle_view_mode,
                    "entity_type": entity_type_id,
                    "bundle": bundle,
                },
            )

        # "full" here means "no default configured", not an explicit choice
        entity_type_view_mode = self.get_entity_type_default_view_mode(entity_type_id)
        if entity_type_view_mode is not None and entity_type_view_mode != FALLBACK_VIEW_MODE:
            if self.validate_view_mode(entity_type_id, bundle, entity_type_view_mode):
                self._checks(
                    "Using entity-type default '%s' for %s/%s",
                    entity_type_view_mode,
                    entity_type_id,
                    bundle,
                )
                return entity_type_view_mode
            self.logger.warning(
                'Invalid entity-type default view mode "%s" configured for %s',
                entity_type_view_mode,
                entity_type_id,
                extra={
                    "view_mode": entity_type_view_mode,
                    "entity_type": entity_type_id,
                    "bundle": bundle,
                },
            )

        self._checks("Falling back to '%s' for %s/%s", FALLBACK_VIEW_MODE, entity_type_id, bundle)
        return FALLBACK_VIEW_MODE

    def get_bundle_view_mode(self, entity_type_id: str, bundle: str) -> str | None:
        """Get the bundle-specific view mode if its override is enabled.

        Returns:
            The bundle view mode, or None when there is no enabled override
        """
        try:
            bundle_entity = self._get_bundle_entity(entity_type_id, bundle)
            if bundle_entity is None:
                return None

            enable_override = bundle_entity.get_third_party_setting(
                MODULE_NAMESPACE, "enable_override", False
            )
            if not enable_override:
                return None

            view_mode = bundle_entity.get_third_party_setting(MODULE_NAMESPACE, "view_mode")
            return str(view_mode) if view_mode is not None else None
        except Exception as e:  # noqa: BLE001 - resolution must never raise
            self.logger.error(
                "Error loading bundle entity for %s/%s: %s",
                entity_type_id,
                bundle,
                e,
                extra={"entity_type": entity_type_id, "bundle": bundle},
            )
            return None

    def get_entity_type_default_view_mode(self, entity_type_id: str) -> str | None:
        """Get the entity-type default view mode from the global settings.

        Returns:
            The configured default, or None if not set
        """
        try:
            config = self.config_factory.get(SETTINGS_NAME)
            value = config.get(
                f"third_party_settings.{MODULE_NAMESPACE}.entity_types.{entity_type_id}"
            )
        except Exception as e:  # noqa: BLE001 - resolution must never raise
            self.logger.error(
                "Error reading entity-type default view mode for %s: %s",
                entity_type_id,
                e,
                extra={"entity_type": entity_type_id},
            )
            return None
        if value is None:
            return None
        return str(value)

    def validate_view_mode(self, entity_type_id: str, bundle: str, view_mode: str) -> bool:
        """Check that a view mode exists for an entity type and bundle.

        Returns:
            True if the view mode is available for the bundle, False otherwise
            (including when the lookup itself fails)
        """
        try:
            view_modes = self.entity_display_repository.get_view_mode_options_by_bundle(
                entity_type_id, bundle
            )
        except Exception as e:  # noqa: BLE001 - resolution must never raise
            self.logger.error(
                "Error validating view mode for %s/%s: %s",
                entity_type_id,
                bundle,
                e,
                extra={"view_mode": view_mode, "entity_type": entity_type_id, "bundle": bundle},
            )
            return False
        return view_mode in view_modes

    def _get_bundle_entity(self, entity_type_id: str, bundle: str) -> BundleEntity | None:
        """Load the bundle record, or None for bundle-less types and missing records."""
        try:
            entity_type = self.entity_type_manager.get_definition(entity_type_id)
            bundle_entity_type = entity_type.bundle_entity_type
            if bundle_entity_type is None:
                return None
            return self.entity_type_manager.get_storage(bundle_entity_type).load(bundle)
        except Exception:  # noqa: BLE001 - absence, not failure
            return None

    def _checks(self, msg: str, *args: object) -> None:
        if isinstance(self.logger, ViewModesLogger):
            self.logger.checks(msg, *args)
        else:
            self.logger.debug(msg, *args)

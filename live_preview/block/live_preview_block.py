"""
Live Preview Block: embeds a rendered node elsewhere on a site.

On a "create <type>" page it shows the node configured for that content
type, so editors see a finished example while filling in the form. On
any other page it shows the page's own node, if there is one.
"""

import logging
from typing import Any, Dict, List, Optional

from live_preview.config import Settings, get_settings
from live_preview.errors import FormValidationError
from live_preview.models.block import NID_PREFIX, BlockConfiguration
from live_preview.models.context import CreatingContext, ResolutionContext
from live_preview.models.entity import Entity
from live_preview.models.form import FormElement
from live_preview.models.render import RenderArray
from live_preview.rendering.display_repository import EntityDisplayRepository
from live_preview.rendering.view_builder import ViewBuilder
from live_preview.rendering.view_modes import effective_view_mode
from live_preview.storage.entity_store import EntityStore

logger = logging.getLogger(__name__)


class LivePreviewBlock:
    """Block plugin "live_preview_block" (admin label: Live Preview Block)."""

    plugin_id = "live_preview_block"
    admin_label = "Live Preview Block"

    def __init__(
        self,
        configuration: Dict[str, Any],
        context: ResolutionContext,
        entity_store: EntityStore,
        view_builder: ViewBuilder,
        display_repository: Optional[EntityDisplayRepository] = None,
        settings: Optional[Settings] = None,
    ):
        self.entity_store = entity_store
        self.view_builder = view_builder
        self.display_repository = display_repository or view_builder.display_repository
        self.settings = settings or get_settings()
        self.configuration = {**self.default_configuration(), **configuration}
        self.node = self._resolve(context)

    def _resolve(self, context: ResolutionContext) -> Optional[Entity]:
        if isinstance(context, CreatingContext):
            nid = self.get_configuration().node_id_for(context.node_type)
            if nid is None:
                return None
            node = self.entity_store.load(nid)
            if node is None:
                logger.debug(
                    "Configured node %s for %s no longer exists",
                    nid, context.node_type,
                )
            return node
        return context.entity

    def default_configuration(self) -> Dict[str, Any]:
        config: Dict[str, Any] = {
            f"{NID_PREFIX}{t.id}": None for t in self.entity_store.list_node_types()
        }
        config["view_mode"] = self.settings.default_view_mode
        return config

    def get_configuration(self) -> BlockConfiguration:
        return BlockConfiguration.from_settings(self.configuration)

    def build(self) -> RenderArray:
        """Render the resolved node, or a placeholder when there is none."""
        if self.node is None:
            return RenderArray(
                markup=self.settings.placeholder_text,
                classes=[self.settings.preview_class],
                cache_max_age=self.get_cache_max_age(),
            )

        view_mode = effective_view_mode(
            self.node.type,
            self.get_configuration().view_mode,
            full_view_mode_type=self.settings.full_view_mode_type,
            default=self.settings.default_view_mode,
        )
        build = self.view_builder.view(self.node, view_mode)
        build.attach_library(self.settings.library)
        build.add_class(self.settings.preview_class)
        build.cache_max_age = self.get_cache_max_age()
        return build

    def get_cache_max_age(self) -> int:
        return 0

    # --- Configuration form ---

    def block_form(self) -> List[FormElement]:
        """One node picker per content type, plus the view mode select."""
        config = self.get_configuration()
        elements = []
        for node_type in self.entity_store.list_node_types():
            nid = config.node_id_for(node_type.id)
            elements.append(FormElement(
                name=f"{NID_PREFIX}{node_type.id}",
                type="entity_autocomplete",
                title=f"{node_type.label} Node to display",
                description=f"The {node_type.label} node you want to display",
                target_type="node",
                default_value=self.entity_store.load(nid) if nid else None,
            ))

        elements.append(FormElement(
            name="view_mode",
            type="select",
            title="View mode",
            description="Select the view mode you want your node to render in.",
            options=self.display_repository.get_view_mode_options("node"),
            default_value=config.view_mode or self.settings.default_view_mode,
            required=True,
        ))
        return elements

    def block_submit(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Store the picked node per content type and the view mode."""
        view_mode = values.get("view_mode")
        if view_mode not in self.display_repository.get_view_mode_options("node"):
            raise FormValidationError({"view_mode": "An illegal choice has been detected."})
        errors = {}
        picked = {}
        for node_type in self.entity_store.list_node_types():
            key = f"{NID_PREFIX}{node_type.id}"
            nid = values.get(key) or None
            if nid is not None:
                node = self.entity_store.load(nid)
                if node is None or node.entity_type_id != "node":
                    errors[key] = f"There are no content items matching \"{nid}\"."
            picked[key] = nid
        if errors:
            raise FormValidationError(errors)
        self.configuration.update(picked)
        self.configuration["view_mode"] = view_mode
        return self.configuration

"""
Live Preview Node Form: the node edit form with an in-place preview.

Pressing "Preview" re-renders the unsaved entity and patches it into the
page instead of navigating to a separate preview page.

Behavioral Contract:
- A preview never saves anything; the transient entity dies with the request
- Previews skip validation so incomplete drafts can be looked at
- Any other op validates normally and blocks submission on errors
- Content types whose preview mode is "required" cannot be saved until
  the editor has previewed at least once in this form session
- Render failures propagate; there is no partial response
"""

import logging
from typing import Dict, Optional

from live_preview.config import Settings, get_settings
from live_preview.errors import FormValidationError, SubmitNotAllowedError
from live_preview.forms.binding import EntityFormBinder, FormValidator
from live_preview.models.ajax import AjaxResponse, InvokeCommand, ReplaceCommand
from live_preview.models.entity import Entity, FieldType, PreviewMode
from live_preview.models.form import FormAction, FormState, InlineWidgetState
from live_preview.models.render import RenderArray
from live_preview.rendering.view_builder import ViewBuilder
from live_preview.rendering.view_modes import effective_view_mode
from live_preview.storage.config_store import ConfigStore
from live_preview.storage.entity_store import EntityStore

logger = logging.getLogger(__name__)

NODE_PREVIEW_LIBRARY = "node/drupal.node.preview"
SET_TARGET_NEW = "set_target_new"


def reconcile_inline_widgets(
    entity: Entity, widgets: Dict[str, InlineWidgetState]
) -> Entity:
    """
    Copy sub-entities pending in inline widgets onto the entity.

    A widget only lands in an entity reference field carrying its bound
    field name, and only when it holds entities. Everything else is skipped.
    """
    for widget_id, widget_state in widgets.items():
        if not widget_state.instance_name or not widget_state.entities:
            logger.debug("Skipping empty inline widget %s", widget_id)
            continue
        for definition, _ in entity.iter_fields():
            if definition.type != FieldType.ENTITY_REFERENCE:
                continue
            if definition.name == widget_state.instance_name:
                entity.set_value(
                    definition.name,
                    [e.model_copy(deep=True) for e in widget_state.entities],
                )
                logger.debug(
                    "Merged %d inline entities from %s into %s",
                    len(widget_state.entities), widget_id, definition.name,
                )
    return entity


class LivePreviewNodeForm:
    """
    Node add/edit form controller.

    ``original`` is the stored entity being edited, or None on the add form.
    """

    def __init__(
        self,
        node_type_id: str,
        entity_store: EntityStore,
        view_builder: ViewBuilder,
        config_store: ConfigStore,
        original: Optional[Entity] = None,
        binder: Optional[EntityFormBinder] = None,
        validator: Optional[FormValidator] = None,
        settings: Optional[Settings] = None,
    ):
        self.node_type = entity_store.get_node_type(node_type_id)
        self.entity_store = entity_store
        self.view_builder = view_builder
        self.config_store = config_store
        self.original = original
        self.binder = binder or EntityFormBinder(entity_store)
        self.validator = validator or FormValidator(entity_store)
        self.settings = settings or get_settings()
        self.last_build: Optional[RenderArray] = None

    # --- Actions ---

    def actions(self, form_state: FormState) -> Dict[str, FormAction]:
        """The form's buttons, with submit gated on the preview policy."""
        submit_access = (
            self.node_type.preview_mode != PreviewMode.REQUIRED
            or form_state.has_been_previewed
        )
        return {
            "submit": FormAction(
                name="submit",
                label="Save",
                access=submit_access,
                submit_handlers=["submit"],
            ),
            "preview": FormAction(
                name="preview",
                label="Preview",
                access=self.node_type.preview_mode != PreviewMode.DISABLED,
                ajax_callback="live_preview",
            ),
        }

    # --- Validation ---

    def validate(self, form_state: FormState) -> None:
        """Run generic validation, or drop every error when previewing."""
        if form_state.is_preview:
            if form_state.has_errors():
                logger.debug(
                    "Discarding %d validation errors for preview",
                    len(form_state.errors),
                )
            form_state.clear_errors()
            return

        for name, message in self.validator.validate(
            self.node_type, form_state.values
        ).items():
            form_state.set_error(name, message)

    # --- Preview ---

    def live_preview(self, form_state: FormState) -> AjaxResponse:
        """
        Render the unsaved entity and return the commands that patch it in.

        The response replaces the preview region, then re-runs the link
        target behaviour over the whole document.
        """
        self.validate(form_state)

        preview = self.binder.build_entity(
            self.node_type.id, form_state.values, self.original
        )
        preview.in_preview = True
        form_state.has_been_previewed = True

        preview.preview_view_mode = effective_view_mode(
            preview.type,
            self.config_store.get(
                self.settings.block_config_name, "settings.view_mode"
            ),
            full_view_mode_type=self.settings.full_view_mode_type,
            default=self.settings.default_view_mode,
        )

        reconcile_inline_widgets(preview, form_state.inline_entity_form)

        build = self.view_builder.view(preview, preview.preview_view_mode)
        build.attach_library(NODE_PREVIEW_LIBRARY)
        build.attach_library(self.settings.library)
        build.add_class(self.settings.preview_class)
        build.cache_max_age = 0

        logger.info(
            "Live preview of %s %s in view mode %s",
            preview.type, preview.id or "(new)", preview.preview_view_mode,
        )

        response = AjaxResponse()
        response.add_command(ReplaceCommand(
            selector=self.settings.preview_selector,
            payload=build.render(),
        ))
        response.add_command(InvokeCommand(selector=None, method=SET_TARGET_NEW, args=[]))
        self.last_build = build
        return response

    # --- Save ---

    def submit(self, form_state: FormState) -> Entity:
        """Validate and save. Raises instead of saving when either gate fails."""
        if form_state.is_preview:
            raise SubmitNotAllowedError("Preview submissions are never saved.")
        if not self.actions(form_state)["submit"].access:
            logger.warning(
                "Refusing to save %s before it has been previewed",
                self.node_type.id,
            )
            raise SubmitNotAllowedError(
                f"{self.node_type.label} content must be previewed before saving."
            )

        self.validate(form_state)
        if form_state.has_errors():
            logger.warning(
                "Rejected %s submission: %s",
                self.node_type.id, ", ".join(sorted(form_state.errors)),
            )
            raise FormValidationError(form_state.errors)

        entity = self.binder.build_entity(
            self.node_type.id, form_state.values, self.original
        )
        reconcile_inline_widgets(entity, form_state.inline_entity_form)
        return self.entity_store.save(entity)

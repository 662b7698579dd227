"""Exceptions raised by the live preview components."""

from typing import Dict


class LivePreviewError(Exception):
    """Base class for live preview errors."""
    pass


class EntityNotFoundError(LivePreviewError):
    """Raised when an entity ID does not resolve to a stored entity."""

    def __init__(self, entity_id: str):
        super().__init__(f"Entity not found: {entity_id}")
        self.entity_id = entity_id


class UnknownNodeTypeError(LivePreviewError):
    """Raised when a content type ID is not registered."""

    def __init__(self, node_type: str):
        super().__init__(f"Unknown content type: {node_type}")
        self.node_type = node_type


class FormValidationError(LivePreviewError):
    """Raised when a non-preview submission fails validation."""

    def __init__(self, errors: Dict[str, str]):
        super().__init__(
            "Form validation failed: " + ", ".join(sorted(errors))
        )
        self.errors = dict(errors)


class SubmitNotAllowedError(LivePreviewError):
    """Raised when saving is attempted before a required preview."""
    pass


class RenderError(LivePreviewError):
    """Raised when an entity cannot be rendered."""
    pass


class UnknownCommandError(LivePreviewError):
    """Raised when a patch command or invoked method is not registered."""
    pass


class UnknownFormError(LivePreviewError):
    """Raised when a form build ID was never issued, expired, or belongs to another content type."""

    def __init__(self, form_build_id: str):
        super().__init__(f"Unknown form: {form_build_id}")
        self.form_build_id = form_build_id

"""Editor error taxonomy.

Every failure in the editor core is a validation rejection. Each error
carries a stable ``code`` and the HTTP status the API answers with.
"""

from __future__ import annotations


class EditorError(Exception):
    code = "editor_error"
    status_code = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ChainShapeViolation(EditorError):
    """A condition-chain mutation would break the if/elseif/else ordering."""

    code = "chain_shape_violation"
    status_code = 409


class IncompleteConfiguration(EditorError):
    """A save was attempted while required fields are still empty."""

    code = "incomplete_configuration"
    status_code = 400


class InvalidEvaluationMode(EditorError):
    code = "invalid_evaluation_mode"
    status_code = 400


class ConnectionRejected(EditorError):
    code = "connection_rejected"
    status_code = 400


class WrongComponentType(EditorError):
    code = "wrong_component_type"
    status_code = 400


class ComponentNotFound(EditorError):
    code = "component_not_found"
    status_code = 404

    def __init__(self, component_id: str) -> None:
        self.component_id = component_id
        super().__init__(f"Component '{component_id}' not found.")


class EditorNotFound(EditorError):
    code = "editor_not_found"
    status_code = 404

    def __init__(self, editor_id: str) -> None:
        self.editor_id = editor_id
        super().__init__(f"Editor session '{editor_id}' not found.")

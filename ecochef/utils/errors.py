"""Exception hierarchy for EcoChef.

Every error carries a user-facing ``message`` (display locale) kept apart from
the technical detail that only goes to the log.
"""

from typing import Any, Optional


class EcoChefError(Exception):
    """Base exception for recoverable application errors."""

    default_message = "Ocurrió un error. Inténtalo de nuevo."

    def __init__(self, message: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class CameraError(EcoChefError):
    """Camera permission denied or device unavailable."""

    default_message = "No pudimos acceder a la cámara. Revisa los permisos."


class IngestionError(EcoChefError):
    """An image file could not be read or is not a supported image."""

    default_message = "Error al procesar la imagen. Inténtalo de nuevo."


class DetectionError(EcoChefError):
    """Normalized failure of ingredient detection, whatever the provider."""

    default_message = "No pudimos identificar los ingredientes. Inténtalo de nuevo."


class RecipeGenerationError(EcoChefError):
    """Normalized failure of recipe suggestion, whatever the provider."""

    default_message = "No pudimos generar recetas en este momento."


class InvalidTransitionError(EcoChefError, ValueError):
    """A view trigger was fired from a view that does not allow it."""

    def __init__(self, view: str, trigger: str):
        super().__init__(
            f"Trigger '{trigger}' is not allowed from view '{view}'",
            details={"view": view, "trigger": trigger},
        )

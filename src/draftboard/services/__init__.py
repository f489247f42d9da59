"""Business logic services for draftboard."""

from draftboard.services.canvas import CanvasService

__all__ = ["CanvasService"]

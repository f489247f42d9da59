"""Web layer for the draftboard API."""

from draftboard.web.controllers import CanvasController, ChatController, ElementController, GenerationController
from draftboard.web.router import create_router

__all__ = ["CanvasController", "ChatController", "ElementController", "GenerationController", "create_router"]

"""Explicit per-process session state shared by the controller and ingestion."""

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Optional

from ecochef.capture.camera import CaptureSession
from ecochef.models.models import DietaryPreference, Recipe, ViewState
from ecochef.roster.roster import IngredientRoster
from ecochef.utils.logger import logger


@dataclass
class SessionContext:
    """Everything the front end renders. Created at start-up, never persisted."""

    view: ViewState = ViewState.HOME
    is_loading: bool = False
    loading_message: Optional[str] = None
    message: Optional[str] = None
    roster: IngredientRoster = field(default_factory=IngredientRoster)
    recipes: list[Recipe] = field(default_factory=list)
    selected_recipe: Optional[Recipe] = None
    preference: DietaryPreference = DietaryPreference.NONE
    capture: CaptureSession = field(default_factory=CaptureSession)

    def go_to(self, view: ViewState) -> None:
        if view != self.view:
            logger.info(f"View {self.view.value} -> {view.value}", extra={"view": view.value})
        self.view = view

    def notify(self, message: Optional[str]) -> None:
        """Set (or clear) the user-visible message."""
        self.message = message

    @asynccontextmanager
    async def loading(self, message: str) -> AsyncIterator[None]:
        """Hold the loading flag for the duration of the block; always cleared."""
        self.is_loading = True
        self.loading_message = message
        try:
            yield
        finally:
            self.is_loading = False
            self.loading_message = None

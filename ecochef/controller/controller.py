"""View controller: the finite state machine behind the EcoChef screens.

Every user trigger goes through ``ViewController``. A trigger fired from a view
that does not offer it raises InvalidTransitionError (a front-end bug); every
other problem comes back as an ``Outcome`` with a user-visible message and the
session left in a valid view.

Views and triggers:
    HOME           start_scan -> CAMERA, pick_file -> (INGREDIENTS on success),
                   manual_entry -> INGREDIENTS
    CAMERA         capture, cancel -> HOME, finish -> INGREDIENTS / HOME
    INGREDIENTS    add, remove, toggle, set_preference, suggest -> RECIPES,
                   back -> HOME
    RECIPES        select -> RECIPE_DETAIL, back -> INGREDIENTS
    RECIPE_DETAIL  back -> RECIPES
"""

from pathlib import Path
from typing import Optional, Union

from ecochef.controller.session import SessionContext
from ecochef.ingestion.images import STATUS_DETECTING, ImageIngestion
from ecochef.models.models import DietaryPreference, Outcome, Recipe, ViewState
from ecochef.providers.gateway import ProviderGateway
from ecochef.utils.errors import CameraError, InvalidTransitionError, RecipeGenerationError
from ecochef.utils.logger import logger


VALIDATION_MESSAGE = "Añade al menos un ingrediente."
BUSY_MESSAGE = "Espera a que termine la operación en curso."
RECIPE_NOT_FOUND_MESSAGE = "No encontramos esa receta."
STATUS_SUGGESTING = "Diseñando recetas con tus ingredientes..."

TRANSITIONS: dict[ViewState, frozenset[str]] = {
    ViewState.HOME: frozenset({"start_scan", "pick_file", "manual_entry"}),
    ViewState.CAMERA: frozenset({"capture", "cancel", "finish"}),
    ViewState.INGREDIENTS: frozenset({"add", "remove", "toggle", "set_preference", "suggest", "back"}),
    ViewState.RECIPES: frozenset({"select", "back"}),
    ViewState.RECIPE_DETAIL: frozenset({"back"}),
}

BACK_TARGETS: dict[ViewState, ViewState] = {
    ViewState.INGREDIENTS: ViewState.HOME,
    ViewState.RECIPES: ViewState.INGREDIENTS,
    ViewState.RECIPE_DETAIL: ViewState.RECIPES,
}

CAPTURE_KEYS = frozenset({"enter", "return", "\r", "\n"})
CANCEL_KEYS = frozenset({"escape", "esc", "\x1b"})


class ViewController:
    """Drives the session through the screens.

    Args:
        gateway: Provider gateway used for detection and suggestion.
        session: Session state; a fresh one is created when omitted.
        ingestion: Image ingestion; built on the same gateway when omitted.
    """

    def __init__(
        self,
        gateway: ProviderGateway,
        session: Optional[SessionContext] = None,
        ingestion: Optional[ImageIngestion] = None,
    ) -> None:
        self.gateway = gateway
        self.session = session or SessionContext()
        self.ingestion = ingestion or ImageIngestion(gateway)

    @property
    def view(self) -> ViewState:
        return self.session.view

    def allowed_triggers(self) -> frozenset[str]:
        return TRANSITIONS[self.session.view]

    def _check(self, trigger: str) -> Optional[Outcome]:
        """Return a failed Outcome if busy; raise if the trigger is not offered here."""
        if self.session.is_loading:
            logger.debug(f"Ignoring '{trigger}' while loading", extra={"view": self.session.view.value})
            return Outcome.failure(BUSY_MESSAGE)
        if trigger not in TRANSITIONS[self.session.view]:
            raise InvalidTransitionError(self.session.view.value, trigger)
        return None

    # ------------------------------------------------------------------
    # Home
    # ------------------------------------------------------------------

    async def start_scan(self) -> Outcome:
        """Open the camera with an empty capture buffer."""
        busy = self._check("start_scan")
        if busy is not None:
            return busy

        self.session.notify(None)
        self.session.capture.reset()
        self.session.go_to(ViewState.CAMERA)
        try:
            started = await self.session.capture.start()
        except CameraError as e:
            self.session.capture.stop()
            self.session.go_to(ViewState.HOME)
            self.session.notify(e.message)
            return Outcome.failure(e.message)

        # Cancelled while the device was opening; start() already released it
        if not started:
            return Outcome(ok=False)
        if self.session.view != ViewState.CAMERA:
            self.session.capture.stop()
            return Outcome(ok=False)
        return Outcome.success()

    async def upload_file(self, path: Union[str, Path]) -> Outcome:
        """Detect ingredients in an image file; stays on Home if that fails."""
        busy = self._check("pick_file")
        if busy is not None:
            return busy
        return await self.ingestion.ingest_file(self.session, path)

    def manual_entry(self) -> Outcome:
        """Go straight to the roster to type ingredients by hand."""
        busy = self._check("manual_entry")
        if busy is not None:
            return busy
        self.session.notify(None)
        self.session.go_to(ViewState.INGREDIENTS)
        return Outcome.success()

    # ------------------------------------------------------------------
    # Camera
    # ------------------------------------------------------------------

    def capture_photo(self) -> Outcome:
        """Append the current frame to the buffer. Not ready is a silent no-op."""
        busy = self._check("capture")
        if busy is not None:
            return busy
        return Outcome(ok=self.session.capture.capture())

    def cancel_camera(self) -> Outcome:
        """Stop the camera, drop the stills and go back Home."""
        busy = self._check("cancel")
        if busy is not None:
            return busy
        self.session.capture.stop()
        self.session.capture.reset()
        self.session.go_to(ViewState.HOME)
        return Outcome.success()

    async def finish_camera(self) -> Outcome:
        """Stop the camera and ingest the stills in capture order.

        With no stills this returns Home. If detection fails the view stays
        on Camera with the stills kept, so finishing again retries them.
        """
        busy = self._check("finish")
        if busy is not None:
            return busy

        capture = self.session.capture
        capture.stop()
        if len(capture) == 0:
            self.session.go_to(ViewState.HOME)
            return Outcome.success()

        outcome = await self.ingestion.ingest(self.session, capture.images, status=STATUS_DETECTING)
        if outcome.ok:
            capture.drain()
        return outcome

    def handle_key(self, key: str) -> Optional[Outcome]:
        """Camera keyboard shortcuts: Enter captures, Escape cancels.

        Returns:
            The Outcome of the bound action, or None if the key is not bound
            in the current view.
        """
        if self.session.view != ViewState.CAMERA:
            return None
        normalized = key if key in ("\r", "\n", "\x1b") else key.strip().lower()
        if normalized in CAPTURE_KEYS:
            return self.capture_photo()
        if normalized in CANCEL_KEYS:
            return self.cancel_camera()
        return None

    # ------------------------------------------------------------------
    # Ingredient roster
    # ------------------------------------------------------------------

    def add_ingredient(self, name: str) -> Outcome:
        busy = self._check("add")
        if busy is not None:
            return busy
        added = self.session.roster.add_manual(name)
        return Outcome(ok=added is not None)

    def remove_ingredient(self, ingredient_id: str) -> Outcome:
        busy = self._check("remove")
        if busy is not None:
            return busy
        self.session.roster.remove(ingredient_id)
        return Outcome.success()

    def toggle_priority(self, ingredient_id: str) -> Outcome:
        busy = self._check("toggle")
        if busy is not None:
            return busy
        self.session.roster.toggle_priority(ingredient_id)
        return Outcome.success()

    def set_preference(self, preference: DietaryPreference) -> Outcome:
        busy = self._check("set_preference")
        if busy is not None:
            return busy
        self.session.preference = DietaryPreference(preference)
        return Outcome.success()

    async def request_recipes(self) -> Outcome:
        """Ask for a new recipe batch for the current roster and preference.

        An empty roster is rejected without calling the gateway. On failure
        the previous batch (if any) is kept.
        """
        busy = self._check("suggest")
        if busy is not None:
            return busy

        session = self.session
        if not session.roster:
            session.notify(VALIDATION_MESSAGE)
            return Outcome.failure(VALIDATION_MESSAGE)

        session.notify(None)
        async with session.loading(STATUS_SUGGESTING):
            try:
                recipes = await self.gateway.suggest_recipes(session.roster.items, session.preference)
            except RecipeGenerationError as e:
                session.notify(e.message)
                return Outcome.failure(e.message)

        session.recipes = recipes
        session.selected_recipe = None
        session.go_to(ViewState.RECIPES)
        return Outcome.success()

    # ------------------------------------------------------------------
    # Recipes
    # ------------------------------------------------------------------

    def select_recipe(self, recipe: Union[Recipe, str]) -> Outcome:
        """Open a recipe of the current batch, by object or by id."""
        busy = self._check("select")
        if busy is not None:
            return busy

        if isinstance(recipe, Recipe):
            match = next((item for item in self.session.recipes if item is recipe), None)
        else:
            match = next((item for item in self.session.recipes if item.id == recipe), None)
        if match is None:
            return Outcome.failure(RECIPE_NOT_FOUND_MESSAGE)

        self.session.selected_recipe = match
        self.session.go_to(ViewState.RECIPE_DETAIL)
        return Outcome.success()

    def back(self) -> Outcome:
        busy = self._check("back")
        if busy is not None:
            return busy
        if self.session.view == ViewState.RECIPE_DETAIL:
            self.session.selected_recipe = None
        self.session.notify(None)
        self.session.go_to(BACK_TARGETS[self.session.view])
        return Outcome.success()

    def shutdown(self) -> None:
        """Release the camera if it is still held."""
        self.session.capture.stop()

"""
Cooking session controller.

Owns the single SessionState and is the only place it changes. Every input
(transcripts, button presses, timer ticks, narration completion, recipe
loads) goes through one asyncio queue and is handled to completion before the
next one is taken, so transitions never interleave.
"""

import asyncio
import logging
from collections import deque
from typing import Any, Awaitable, Callable, Deque, List, Optional, Union

from ..exceptions import FavoritesStoreError
from ..models.commands import Unknown
from ..models.recipe import Recipe
from ..models.session import (
    CancelTimerEffect,
    Effect,
    PersistFavorite,
    SearchEffect,
    SessionState,
    ShowIngredientsEffect,
    Speak,
    StartTimerEffect,
    TimerRunning,
)
from ..services.favorites import FavoritesStore
from ..services.recipe_catalog import RecipeCatalog
from .interpreter import interpret
from .narration import NarrationCoordinator
from .state_machine import apply
from .timer_engine import TimerEngine

log = logging.getLogger(__name__)

StateListener = Callable[[SessionState], Union[Awaitable[None], None]]
IntentListener = Callable[[Effect], Union[Awaitable[None], None]]


class Tick:
    """Marker: one scheduler period has passed."""


class NarrationFinished:
    def __init__(self, utterance_id: int):
        self.utterance_id = utterance_id


class LoadRecipe:
    def __init__(self, recipe_id: str):
        self.recipe_id = recipe_id


class Shutdown:
    """Marker: stop the consumer loop."""


class CookingSession:
    def __init__(
        self,
        catalog: RecipeCatalog,
        favorites: FavoritesStore,
        narrator: NarrationCoordinator,
        default_recipe: Recipe,
        timer: Optional[TimerEngine] = None,
        tick_interval: float = 1.0,
    ):
        self.catalog = catalog
        self.favorites = favorites
        self.narrator = narrator
        self.default_recipe = default_recipe
        self.timer = timer or TimerEngine()
        self.tick_interval = tick_interval

        self.state = SessionState()
        self.queue: asyncio.Queue = asyncio.Queue()
        self._state_listeners: List[StateListener] = []
        self._intent_listeners: List[IntentListener] = []
        self._ticker: Optional[asyncio.Task] = None

    # --- wiring --------------------------------------------------------

    def subscribe(self, listener: StateListener) -> None:
        self._state_listeners.append(listener)

    def on_intent(self, listener: IntentListener) -> None:
        """Register a consumer for ingredient-display and search intents."""
        self._intent_listeners.append(listener)

    # --- producers -----------------------------------------------------

    def submit(self, event: Any) -> None:
        self.queue.put_nowait(event)

    def submit_transcript(self, transcript: str, final: bool = True) -> None:
        if not final:
            return
        self.submit(interpret(transcript))

    def request_load(self, recipe_id: str) -> None:
        self.submit(LoadRecipe(recipe_id))

    def narration_finished(self, utterance_id: int) -> None:
        self.submit(NarrationFinished(utterance_id))

    def start_ticker(self) -> None:
        if self._ticker is None:
            self._ticker = asyncio.create_task(self._tick_forever())

    async def _tick_forever(self) -> None:
        while True:
            await asyncio.sleep(self.tick_interval)
            self.submit(Tick())

    # --- consumer ------------------------------------------------------

    async def run(self) -> None:
        """Consume the queue until a Shutdown marker arrives."""
        while True:
            item = await self.queue.get()
            if isinstance(item, Shutdown):
                break
            try:
                await self.handle(item)
            except Exception as e:
                log.error(f"❌ Failed to handle {item!r}: {e}")

    async def handle(self, item: Any) -> None:
        if isinstance(item, LoadRecipe):
            await self.load_recipe(item.recipe_id)
            return

        if isinstance(item, Tick):
            event = self.timer.tick()
            if event is None:
                return
            await self._process(event)
        elif isinstance(item, NarrationFinished):
            for event in self.narrator.engine_finished(item.utterance_id):
                await self._process(event)
        else:
            if isinstance(item, Unknown):
                log.info(f"Command not recognized: '{item.raw_text}'")
            await self._process(item)

        await self._publish()

    async def load_recipe(self, recipe_id: str) -> SessionState:
        """
        Start a fresh session on ``recipe_id``, or on the default recipe when
        the catalog cannot provide it.
        """
        fallback = False
        error = None
        try:
            recipe = self.catalog.get(recipe_id)
        except Exception as e:
            log.warning(f"Recipe fetch failed, using default recipe: {e}")
            recipe = self.default_recipe
            fallback = True
            error = f"Using sample recipe: {e}"

        self.timer.cancel()
        for event in await self.narrator.stop():
            await self._process(event)

        self.state = SessionState.for_recipe(
            recipe,
            favorited=self.favorites.is_favorite(recipe.id),
            fallback=fallback,
            error=error,
        )
        log.info(f"Session started on '{recipe.title}' ({len(recipe.steps)} steps)")

        first = recipe.steps[0]
        effects: List[Effect] = [Speak(text=first.instruction)]
        if first.duration_seconds > 0:
            effects.append(StartTimerEffect(seconds=first.duration_seconds))
        await self._run_effects(effects)
        await self._publish()
        return self.state

    async def close(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
        self.timer.cancel()
        await self.narrator.stop()
        self.submit(Shutdown())

    # --- internals -----------------------------------------------------

    async def _process(self, event: Any) -> None:
        self.state, effects = apply(self.state, event)
        await self._run_effects(effects)

    async def _run_effects(self, effects: List[Effect]) -> None:
        pending: Deque[Effect] = deque(effects)
        while pending:
            effect = pending.popleft()
            for event in await self._execute(effect):
                self.state, more = apply(self.state, event)
                pending.extend(more)

    async def _execute(self, effect: Effect) -> List[Any]:
        """Carry out one effect; return the events it produced."""
        if isinstance(effect, Speak):
            return await self.narrator.speak(effect.text)

        if isinstance(effect, StartTimerEffect):
            try:
                self.timer.start(effect.seconds)
            except ValueError as e:
                log.warning(f"Timer not started: {e}")
                return []
            return [TimerRunning(remaining=effect.seconds)]

        if isinstance(effect, CancelTimerEffect):
            self.timer.cancel()
            return []

        if isinstance(effect, PersistFavorite):
            try:
                self.favorites.set_favorite(effect.recipe_id, effect.favorited)
            except FavoritesStoreError as e:
                log.warning(f"Favorite not persisted: {e}")
            return []

        if isinstance(effect, (ShowIngredientsEffect, SearchEffect)):
            for listener in self._intent_listeners:
                await self._notify(listener, effect)
            return []

        log.warning(f"Unhandled effect {effect!r}")
        return []

    async def _publish(self) -> None:
        for listener in self._state_listeners:
            await self._notify(listener, self.state)

    async def _notify(self, listener: Callable, payload: Any) -> None:
        try:
            result = listener(payload)
            if asyncio.iscoroutine(result):
                await result
        except Exception as e:
            log.error(f"Listener {listener!r} failed: {e}")

"""
Pure transition function for a cooking session.

``apply(state, event)`` never touches a timer, a speaker or a disk. It returns
the next state together with the effects the session controller should carry
out. Every (state, event) pair has a result; where no rule applies the state
comes back unchanged.
"""

from typing import List

from ..models.commands import (
    COMMAND_TYPES,
    AddFavorite,
    NextStep,
    PreviousStep,
    RemoveFavorite,
    RepeatStep,
    SearchQuery,
    ShowIngredients,
    StartTimer,
)
from ..models.session import (
    CancelTimerEffect,
    Effect,
    NarrationCancelled,
    NarrationEnded,
    NarrationStarted,
    NarrationStatus,
    PersistFavorite,
    SearchEffect,
    SessionState,
    ShowIngredientsEffect,
    Speak,
    StartTimerEffect,
    TimerExpired,
    TimerRunning,
    TimerStatus,
    Transition,
    UiEvent,
    UiGoToStep,
    UiNavigate,
)

STOPPED = TimerStatus()


def _go_to(state: SessionState, index: int) -> Transition:
    """Move to ``index``, resetting the timer and narrating the new step."""
    recipe = state.recipe
    if recipe is None or index == state.step_index or not 0 <= index < len(recipe.steps):
        return Transition(state, [])

    step = recipe.steps[index]
    effects: List[Effect] = [Speak(text=step.instruction)]
    if step.duration_seconds > 0:
        effects.append(StartTimerEffect(seconds=step.duration_seconds))
    else:
        effects.append(CancelTimerEffect())

    return Transition(state.model_copy(update={"step_index": index, "timer": STOPPED}), effects)


def _apply_command(state: SessionState, command) -> Transition:
    state = state.model_copy(update={"last_command": command})
    recipe = state.recipe
    if recipe is None:
        return Transition(state, [])

    if isinstance(command, NextStep):
        return _go_to(state, state.step_index + 1)

    if isinstance(command, PreviousStep):
        return _go_to(state, state.step_index - 1)

    if isinstance(command, RepeatStep):
        return Transition(state, [Speak(text=state.current_instruction)])

    if isinstance(command, ShowIngredients):
        return Transition(state, [ShowIngredientsEffect(ingredients=list(recipe.ingredients))])

    if isinstance(command, StartTimer):
        timer = TimerStatus(remaining_seconds=command.seconds, running=True)
        return Transition(
            state.model_copy(update={"timer": timer}),
            [StartTimerEffect(seconds=command.seconds)],
        )

    if isinstance(command, (AddFavorite, RemoveFavorite)):
        favorited = isinstance(command, AddFavorite)
        return Transition(
            state.model_copy(update={"favorited": favorited}),
            [PersistFavorite(recipe_id=recipe.id, favorited=favorited)],
        )

    if isinstance(command, SearchQuery):
        return Transition(state, [SearchEffect(query=command.text)])

    # Unknown: recorded, nothing else
    return Transition(state, [])


def _apply_timer(state: SessionState, event) -> Transition:
    if isinstance(event, TimerRunning):
        timer = TimerStatus(remaining_seconds=event.remaining, running=event.remaining > 0)
        return Transition(state.model_copy(update={"timer": timer}), [])

    # Expired: stop, then advance exactly as a spoken "next step" would
    state = state.model_copy(update={"timer": STOPPED})
    return _apply_command(state, NextStep())


def _apply_narration(state: SessionState, event) -> Transition:
    if isinstance(event, NarrationStarted):
        narration = NarrationStatus(active=True, text=event.text)
    else:
        narration = NarrationStatus()
    return Transition(state.model_copy(update={"narration": narration}), [])


def _apply_ui(state: SessionState, event: UiEvent) -> Transition:
    if isinstance(event, UiNavigate):
        delta = 1 if event.direction == "next" else -1
        return _go_to(state, state.step_index + delta)
    return _go_to(state, event.index)


def apply(state: SessionState, event) -> Transition:
    if isinstance(event, COMMAND_TYPES):
        return _apply_command(state, event)
    if isinstance(event, (TimerRunning, TimerExpired)):
        return _apply_timer(state, event)
    if isinstance(event, (NarrationStarted, NarrationEnded, NarrationCancelled)):
        return _apply_narration(state, event)
    if isinstance(event, (UiNavigate, UiGoToStep)):
        return _apply_ui(state, event)
    return Transition(state, [])

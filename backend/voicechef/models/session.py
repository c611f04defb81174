"""
Session state plus the events that drive it and the effects it requests.
"""

from __future__ import annotations

from typing import List, Literal, NamedTuple, Optional, Union

from pydantic import BaseModel, conint

from .commands import Command, Unknown
from .recipe import Recipe


class TimerStatus(BaseModel):
    remaining_seconds: conint(ge=0) = 0
    running: bool = False

    model_config = {"frozen": True}


class NarrationStatus(BaseModel):
    active: bool = False
    text: Optional[str] = None

    model_config = {"frozen": True}


class SessionState(BaseModel):
    recipe: Optional[Recipe] = None
    step_index: conint(ge=0) = 0
    timer: TimerStatus = TimerStatus()
    narration: NarrationStatus = NarrationStatus()
    favorited: bool = False
    last_command: Optional[Command] = None
    fallback: bool = False
    error: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def for_recipe(
        cls,
        recipe: Recipe,
        favorited: bool = False,
        fallback: bool = False,
        error: Optional[str] = None,
    ) -> "SessionState":
        return cls(recipe=recipe, favorited=favorited, fallback=fallback, error=error)

    @property
    def current_instruction(self) -> Optional[str]:
        if self.recipe is None:
            return None
        return self.recipe.steps[self.step_index].instruction

    @property
    def recognized(self) -> bool:
        return not isinstance(self.last_command, Unknown)

    def snapshot(self) -> dict:
        """Plain dict for the rendering layer."""
        data = self.model_dump(mode="json")
        data["recognized"] = self.recognized
        data["total_steps"] = len(self.recipe.steps) if self.recipe else 0
        return data


# --- engine events ---------------------------------------------------------


class TimerRunning(BaseModel):
    kind: Literal["timer_running"] = "timer_running"
    remaining: conint(ge=0)

    model_config = {"frozen": True}


class TimerExpired(BaseModel):
    kind: Literal["timer_expired"] = "timer_expired"

    model_config = {"frozen": True}


TimerEvent = Union[TimerRunning, TimerExpired]


class NarrationStarted(BaseModel):
    kind: Literal["narration_started"] = "narration_started"
    utterance_id: int
    text: str

    model_config = {"frozen": True}


class NarrationEnded(BaseModel):
    kind: Literal["narration_ended"] = "narration_ended"
    utterance_id: int

    model_config = {"frozen": True}


class NarrationCancelled(BaseModel):
    kind: Literal["narration_cancelled"] = "narration_cancelled"
    utterance_id: int

    model_config = {"frozen": True}


NarrationEvent = Union[NarrationStarted, NarrationEnded, NarrationCancelled]


class UiNavigate(BaseModel):
    """Manual next/previous button press."""

    kind: Literal["ui_navigate"] = "ui_navigate"
    direction: Literal["next", "previous"]

    model_config = {"frozen": True}


class UiGoToStep(BaseModel):
    """Manual jump to a step picked in the step list."""

    kind: Literal["ui_go_to_step"] = "ui_go_to_step"
    index: int

    model_config = {"frozen": True}


UiEvent = Union[UiNavigate, UiGoToStep]


# --- effects ---------------------------------------------------------------


class Speak(BaseModel):
    text: str

    model_config = {"frozen": True}


class StartTimerEffect(BaseModel):
    seconds: conint(gt=0)

    model_config = {"frozen": True}


class CancelTimerEffect(BaseModel):
    model_config = {"frozen": True}


class PersistFavorite(BaseModel):
    recipe_id: str
    favorited: bool

    model_config = {"frozen": True}


class ShowIngredientsEffect(BaseModel):
    ingredients: List[str]

    model_config = {"frozen": True}


class SearchEffect(BaseModel):
    query: str

    model_config = {"frozen": True}


Effect = Union[
    Speak,
    StartTimerEffect,
    CancelTimerEffect,
    PersistFavorite,
    ShowIngredientsEffect,
    SearchEffect,
]


class Transition(NamedTuple):
    state: SessionState
    effects: List[Effect]

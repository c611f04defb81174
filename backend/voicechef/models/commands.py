"""
Structured commands produced by the voice interpreter.

Every variant carries a ``kind`` literal so a command can be sent over the
wire and validated back into the right class.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, conint, constr


class _BaseCommand(BaseModel):
    model_config = {"frozen": True}


class NextStep(_BaseCommand):
    kind: Literal["next_step"] = "next_step"


class PreviousStep(_BaseCommand):
    kind: Literal["previous_step"] = "previous_step"


class RepeatStep(_BaseCommand):
    kind: Literal["repeat_step"] = "repeat_step"


class ShowIngredients(_BaseCommand):
    kind: Literal["show_ingredients"] = "show_ingredients"


class StartTimer(_BaseCommand):
    kind: Literal["start_timer"] = "start_timer"
    seconds: conint(gt=0)


class AddFavorite(_BaseCommand):
    kind: Literal["add_favorite"] = "add_favorite"


class RemoveFavorite(_BaseCommand):
    kind: Literal["remove_favorite"] = "remove_favorite"


class SearchQuery(_BaseCommand):
    kind: Literal["search_query"] = "search_query"
    text: constr(min_length=1)


class Unknown(_BaseCommand):
    kind: Literal["unknown"] = "unknown"
    raw_text: str = ""


Command = Annotated[
    Union[
        NextStep,
        PreviousStep,
        RepeatStep,
        ShowIngredients,
        StartTimer,
        AddFavorite,
        RemoveFavorite,
        SearchQuery,
        Unknown,
    ],
    Field(discriminator="kind"),
]

COMMAND_TYPES = (
    NextStep,
    PreviousStep,
    RepeatStep,
    ShowIngredients,
    StartTimer,
    AddFavorite,
    RemoveFavorite,
    SearchQuery,
    Unknown,
)

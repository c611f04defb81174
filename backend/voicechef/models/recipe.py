from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, conint, constr


class RecipeStep(BaseModel):
    instruction: constr(strip_whitespace=True, min_length=1)
    duration_seconds: conint(ge=0) = 0

    model_config = {"frozen": True}


class Recipe(BaseModel):
    id: str
    title: str
    ingredients: List[str] = []
    steps: List[RecipeStep] = Field(min_length=1)
    category: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None

    model_config = {"frozen": True}


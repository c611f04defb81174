"""
Turn pasted recipe text into a Recipe.

Numbered lines become steps, bulleted lines become ingredients, and the first
plain line is the title. A step that mentions a duration ("simmer for 15
minutes") gets an automatic timer of that length.
"""

import re
import uuid
from typing import List

from ..core.interpreter import parse_duration
from ..models.recipe import Recipe, RecipeStep


class RecipeParser:
    step_pattern = re.compile(r"^\s*\d+[.\)]\s*(.*)$", re.M)
    ingredient_pattern = re.compile(r"^\s*[-*•]\s*(.+)$", re.M)

    @classmethod
    def _title(cls, raw: str) -> str:
        for line in raw.splitlines():
            line = line.strip()
            if not line or cls.step_pattern.match(line) or cls.ingredient_pattern.match(line):
                continue
            if line.rstrip(":").lower() in ("ingredients", "steps", "instructions", "method"):
                continue
            return line
        return "Untitled"

    @classmethod
    async def parse(cls, raw: str) -> Recipe:
        instructions: List[str] = [m.group(1).strip() for m in cls.step_pattern.finditer(raw)]
        ingredients: List[str] = [m.group(1).strip() for m in cls.ingredient_pattern.finditer(raw)]
        title = cls._title(raw)

        if not instructions:
            # Fallback to trivial split
            instructions = [line.strip() for line in raw.splitlines() if line.strip()]
            title = "Untitled"

        steps = [
            RecipeStep(instruction=text, duration_seconds=parse_duration(text.lower()))
            for text in instructions
            if text
        ]
        return Recipe(
            id=f"parsed-{uuid.uuid4().hex[:8]}",
            title=title,
            ingredients=ingredients,
            steps=steps,
        )

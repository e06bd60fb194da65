from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple


@dataclass
class Recipe:
    """Domain object representing a stored recipe.

    ``ingredients`` or ``method`` is ``None`` only for records whose sibling
    field was dropped by a legacy partial edit.
    """

    id: int
    ingredients: Optional[List[str]]
    method: Optional[str]
    time: Optional[str] = None

    def copy(self) -> "Recipe":
        ingredients = list(self.ingredients) if self.ingredients is not None else None
        return Recipe(id=self.id, ingredients=ingredients, method=self.method, time=self.time)

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"id": self.id}
        if self.ingredients is not None:
            data["ingredients"] = list(self.ingredients)
        if self.method is not None:
            data["method"] = self.method
        if self.time is not None:
            data["time"] = self.time
        return data


class StorageCorruptError(ValueError):
    """Raised when a stored value does not decode to a list of recipes."""


def parse_ingredients(ingredients_text: str) -> List[str]:
    # Every comma-delimited segment is kept verbatim, empty ones included.
    return ingredients_text.split(",")


def _recipe_from_dict(data: Any) -> Recipe:
    if not isinstance(data, dict):
        raise StorageCorruptError(f"Recipe entry must be an object, got {type(data).__name__}.")

    recipe_id = data.get("id")
    if isinstance(recipe_id, bool) or not isinstance(recipe_id, int) or recipe_id < 1:
        raise StorageCorruptError(f"Invalid recipe id: {recipe_id!r}.")

    ingredients = data.get("ingredients")
    if ingredients is not None:
        if not isinstance(ingredients, list) or not all(isinstance(i, str) for i in ingredients):
            raise StorageCorruptError(f"Recipe {recipe_id} has invalid ingredients.")

    method = data.get("method")
    if method is not None and not isinstance(method, str):
        raise StorageCorruptError(f"Recipe {recipe_id} has an invalid method.")

    time = data.get("time")
    if time is not None:
        # The sample data stores minutes as text; accept plain numbers too.
        if isinstance(time, bool) or not isinstance(time, (str, int)):
            raise StorageCorruptError(f"Recipe {recipe_id} has an invalid time.")
        time = str(time)

    return Recipe(id=recipe_id, ingredients=ingredients, method=method, time=time)


def encode_recipes(recipes: Sequence[Recipe], next_id: int) -> bytes:
    """Serialize the full record list and the id counter for the storage slot."""

    payload = {
        "next_id": next_id,
        "recipes": [recipe.to_dict() for recipe in recipes],
    }
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def decode_recipes(raw: bytes) -> Tuple[List[Recipe], int]:
    """Decode a stored slot value into ``(recipes, next_id)``.

    Both the ``{"next_id": ..., "recipes": [...]}`` envelope and a bare JSON
    list of records are accepted. For a bare list the counter is derived from
    the highest stored id. Raises :class:`StorageCorruptError` on anything
    else.
    """

    try:
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise StorageCorruptError(f"Stored recipes are not valid JSON: {exc}") from exc

    stored_next_id: Any = None
    if isinstance(payload, dict):
        stored_next_id = payload.get("next_id")
        entries = payload.get("recipes")
    else:
        entries = payload

    if not isinstance(entries, list):
        raise StorageCorruptError("Stored recipes must be a list.")

    recipes = [_recipe_from_dict(entry) for entry in entries]

    ids = [recipe.id for recipe in recipes]
    if len(set(ids)) != len(ids):
        raise StorageCorruptError("Stored recipes contain duplicate ids.")

    next_id = max(ids, default=0) + 1
    if stored_next_id is not None:
        if isinstance(stored_next_id, bool) or not isinstance(stored_next_id, int):
            raise StorageCorruptError(f"Invalid id counter: {stored_next_id!r}.")
        next_id = max(next_id, stored_next_id)

    return recipes, next_id


SAMPLE_RECIPES = (
    Recipe(
        id=1,
        ingredients=["chilli", "garlic", "rice"],
        method="fry chilli and garlic in pan, cook rice in water",
        time="15",
    ),
    Recipe(
        id=2,
        ingredients=["banana", "custard", "cinnamon"],
        method="slice bananas, warm custard, and sprinkle cinnamon",
        time="7",
    ),
)


__all__ = [
    "Recipe",
    "SAMPLE_RECIPES",
    "StorageCorruptError",
    "decode_recipes",
    "encode_recipes",
    "parse_ingredients",
]

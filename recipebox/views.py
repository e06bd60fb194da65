from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Sequence, Tuple

from flask import render_template

from .models import Recipe, parse_ingredients
from .store import Change

EMPTY_MESSAGE = "Wanna get cookin'? Add a recipe!"
PAGE_TITLE = "Recipes \U0001f966"

AddHandler = Callable[[str, str], Change]
DeleteHandler = Callable[[int], Change]
EditIngredientsHandler = Callable[[int, List[str]], Change]
EditMethodHandler = Callable[[int, str], Change]


@dataclass(frozen=True)
class RecipeBlock:
    """What the page shows for one recipe."""

    id: int
    ingredients: Tuple[str, ...] = ()
    method: str = ""
    time: Optional[str] = None

    @property
    def ingredients_text(self) -> str:
        return ",".join(self.ingredients)


class RecipeView:
    """Visual representation of the recipe list.

    :meth:`render` throws away the previous blocks and builds new ones from
    the given recipes. User input reaches the handlers bound through the
    ``bind_*`` methods; the view never touches the store directly.
    """

    def __init__(self) -> None:
        self.blocks: Tuple[RecipeBlock, ...] = ()
        self.placeholder: Optional[str] = EMPTY_MESSAGE
        self._add_handler: Optional[AddHandler] = None
        self._delete_handler: Optional[DeleteHandler] = None
        self._edit_ingredients_handler: Optional[EditIngredientsHandler] = None
        self._edit_method_handler: Optional[EditMethodHandler] = None

    def render(self, recipes: Sequence[Recipe]) -> None:
        self.blocks = tuple(_build_block(recipe) for recipe in recipes)
        self.placeholder = EMPTY_MESSAGE if not self.blocks else None

    def page(self) -> str:
        return render_template(
            "index.html",
            blocks=self.blocks,
            placeholder=self.placeholder,
            title=PAGE_TITLE,
        )

    def bind_add_recipe(self, handler: AddHandler) -> None:
        self._add_handler = handler

    def bind_delete_recipe(self, handler: DeleteHandler) -> None:
        self._delete_handler = handler

    def bind_edit_ingredients(self, handler: EditIngredientsHandler) -> None:
        self._edit_ingredients_handler = handler

    def bind_edit_method(self, handler: EditMethodHandler) -> None:
        self._edit_method_handler = handler

    def submit_recipe(self, form: Mapping[str, str]) -> Optional[Change]:
        """Raise an add request from the form.

        Returns ``None`` without raising anything when both fields are empty.
        """

        ingredients_text = form.get("ingredients", "")
        method = form.get("method", "")

        if not (ingredients_text or method) or self._add_handler is None:
            return None
        return self._add_handler(ingredients_text, method)

    def request_delete(self, recipe_id: int) -> Optional[Change]:
        if self._delete_handler is None:
            return None
        return self._delete_handler(recipe_id)

    def submit_ingredients(self, recipe_id: int, form: Mapping[str, str]) -> Optional[Change]:
        if self._edit_ingredients_handler is None:
            return None
        return self._edit_ingredients_handler(
            recipe_id, parse_ingredients(form.get("ingredients", ""))
        )

    def submit_method(self, recipe_id: int, form: Mapping[str, str]) -> Optional[Change]:
        if self._edit_method_handler is None:
            return None
        return self._edit_method_handler(recipe_id, form.get("method", ""))


def _build_block(recipe: Recipe) -> RecipeBlock:
    return RecipeBlock(
        id=recipe.id,
        ingredients=tuple(recipe.ingredients or ()),
        method=recipe.method or "",
        time=recipe.time,
    )


__all__ = ["EMPTY_MESSAGE", "PAGE_TITLE", "RecipeBlock", "RecipeView"]

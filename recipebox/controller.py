from __future__ import annotations

from typing import List

from .models import Recipe
from .store import Change, RecipeStore
from .views import RecipeView


class RecipeController:
    """Links user input coming from the view to the store, and store changes back to the view."""

    def __init__(self, store: RecipeStore, view: RecipeView) -> None:
        self.store = store
        self.view = view

        self.store.bind_changed(self.on_recipes_changed)

        # Display initial recipes
        self.on_recipes_changed(self.store.recipes)

        self.view.bind_add_recipe(self.handle_add_recipe)
        self.view.bind_edit_ingredients(self.handle_edit_ingredients)
        self.view.bind_edit_method(self.handle_edit_method)

    def on_recipes_changed(self, recipes: List[Recipe]) -> None:
        self.view.render(recipes)
        # The blocks were rebuilt, so their delete controls are bound again.
        self.view.bind_delete_recipe(self.handle_delete_recipe)

    def handle_add_recipe(self, ingredients_text: str, method: str) -> Change:
        return self.store.add_recipe(ingredients_text, method)

    def handle_delete_recipe(self, recipe_id: int) -> Change:
        return self.store.delete_recipe(recipe_id)

    def handle_edit_ingredients(self, recipe_id: int, updated_ingredients: List[str]) -> Change:
        return self.store.edit_ingredients(recipe_id, updated_ingredients)

    def handle_edit_method(self, recipe_id: int, updated_method: str) -> Change:
        return self.store.edit_method(recipe_id, updated_method)


__all__ = ["RecipeController"]

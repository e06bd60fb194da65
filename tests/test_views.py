from __future__ import annotations

from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from recipebox.controller import RecipeController
from recipebox.models import Recipe
from recipebox.store import RecipeStore
from recipebox.views import EMPTY_MESSAGE, RecipeBlock, RecipeView


class InMemoryPersistence:
    def __init__(self) -> None:
        self.value: bytes | None = None

    def load(self) -> bytes | None:
        return self.value

    def save(self, data: bytes) -> None:
        self.value = data


def test_render_rebuilds_blocks_and_placeholder():
    view = RecipeView()
    assert view.placeholder == EMPTY_MESSAGE

    view.render([Recipe(id=3, ingredients=["a", ""], method="m", time="5")])
    assert view.blocks == (RecipeBlock(id=3, ingredients=("a", ""), method="m", time="5"),)
    assert view.blocks[0].ingredients_text == "a,"
    assert view.placeholder is None

    view.render([])
    assert view.blocks == ()
    assert view.placeholder == EMPTY_MESSAGE


def test_render_shows_dropped_fields_as_empty():
    view = RecipeView()

    view.render([Recipe(id=1, ingredients=None, method="m"), Recipe(id=2, ingredients=["x"], method=None)])

    assert view.blocks == (
        RecipeBlock(id=1, ingredients=(), method="m"),
        RecipeBlock(id=2, ingredients=("x",), method=""),
    )


def test_submit_requires_some_text():
    view = RecipeView()
    calls = []

    def handle_add(ingredients: str, method: str) -> str:
        calls.append((ingredients, method))
        return "added"

    view.bind_add_recipe(handle_add)

    assert view.submit_recipe({"ingredients": "", "method": ""}) is None
    assert view.submit_recipe({}) is None
    assert view.submit_recipe({"ingredients": "a,b", "method": ""}) == "added"
    assert view.submit_recipe({"method": " "}) == "added"

    assert calls == [("a,b", ""), ("", " ")]


def test_controller_renders_initial_state_and_follows_changes():
    store = RecipeStore(InMemoryPersistence())
    view = RecipeView()
    RecipeController(store, view)

    assert view.placeholder == EMPTY_MESSAGE

    view.submit_recipe({"ingredients": "rice,beans", "method": "simmer"})
    assert [block.id for block in view.blocks] == [1]

    view.submit_ingredients(1, {"ingredients": "rice,peas"})
    view.submit_method(1, {"method": "stir"})
    assert view.blocks == (RecipeBlock(id=1, ingredients=("rice", "peas"), method="stir"),)

    view.request_delete(1)
    assert view.blocks == ()
    assert store.recipes == []


def test_controller_without_edit_notifications_leaves_view_stale():
    store = RecipeStore(InMemoryPersistence(), notify_on_edit=False)
    view = RecipeView()
    RecipeController(store, view)

    view.submit_recipe({"ingredients": "rice", "method": "boil"})
    view.submit_method(1, {"method": "steam"})

    assert view.blocks[0].method == "boil"
    assert store.recipes[0].method == "steam"


def test_intents_return_the_store_outcome():
    store = RecipeStore(InMemoryPersistence())
    view = RecipeView()
    RecipeController(store, view)

    added = view.submit_recipe({"ingredients": "rice", "method": "boil"})

    assert added.saved is True
    assert added.recipe == Recipe(id=1, ingredients=["rice"], method="boil")
    assert view.request_delete(9).matched is False
    assert view.submit_method(9, {"method": "x"}).matched is False
    assert view.request_delete(1).saved is True

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence

from .models import Recipe, StorageCorruptError, decode_recipes, encode_recipes, parse_ingredients
from .storage import Persistence, StorageWriteError

logger = logging.getLogger(__name__)

RecipesObserver = Callable[[List[Recipe]], None]


@dataclass(frozen=True)
class Change:
    """Outcome of one mutation.

    ``matched`` is ``False`` when an edit or delete named an unknown id and
    nothing happened. ``save_error`` is set when the in-memory change was
    applied but could not be written.
    """

    matched: bool
    recipe: Optional[Recipe] = None
    save_error: Optional[StorageWriteError] = None

    @property
    def saved(self) -> bool:
        return self.matched and self.save_error is None


class RecipeStore:
    """Owns the canonical recipe list and keeps the storage slot in sync with it.

    Every successful mutation notifies the single registered observer with a
    snapshot of the list and then writes the full list to ``persistence``.
    A failed write never undoes the in-memory change; it is reported on the
    returned :class:`Change`. Mutations are serialized by a lock held across
    the change, the notification and the write.

    A slot that cannot be read at all (:class:`~recipebox.storage.StorageReadError`)
    makes construction fail, so existing data is never overwritten by an
    empty list.

    Parameters
    ----------
    persistence:
        Durable storage slot holding the serialized list.
    preserve_fields_on_edit:
        When ``False`` a partial edit replaces the record with one holding only
        the id and the edited field, dropping the other one.
    notify_on_edit:
        When ``False`` :meth:`edit_ingredients` and :meth:`edit_method` persist
        without notifying the observer.
    seed:
        Recipes written to the slot when it does not exist yet.
    """

    def __init__(
        self,
        persistence: Persistence,
        *,
        preserve_fields_on_edit: bool = True,
        notify_on_edit: bool = True,
        seed: Iterable[Recipe] = (),
    ) -> None:
        self._persistence = persistence
        self._preserve_fields_on_edit = preserve_fields_on_edit
        self._notify_on_edit = notify_on_edit
        self._observer: Optional[RecipesObserver] = None
        self._lock = threading.RLock()

        self._recipes: List[Recipe] = []
        self._next_id = 1

        raw = persistence.load()
        if raw is None:
            seeded = [recipe.copy() for recipe in seed]
            if seeded:
                self._recipes = seeded
                self._next_id = max(recipe.id for recipe in seeded) + 1
                logger.info("Seeded empty recipe storage with %d recipes", len(seeded))
                self._persist()
            return

        try:
            self._recipes, self._next_id = decode_recipes(raw)
        except StorageCorruptError as exc:
            logger.warning("Ignoring unreadable recipe storage, starting empty: %s", exc)
            return

        logger.info("Loaded %d recipes", len(self._recipes))

    @property
    def recipes(self) -> List[Recipe]:
        """A copy of the current list, safe to mutate."""

        with self._lock:
            return [recipe.copy() for recipe in self._recipes]

    def bind_changed(self, callback: RecipesObserver) -> None:
        """Register the observer; a later registration replaces an earlier one."""

        self._observer = callback

    def add_recipe(self, ingredients_text: str, method: str) -> Change:
        ingredients = parse_ingredients(ingredients_text)

        with self._lock:
            recipe_id = max(self._next_id, max((r.id for r in self._recipes), default=0) + 1)
            recipe = Recipe(id=recipe_id, ingredients=ingredients, method=method)

            self._recipes.append(recipe)
            self._next_id = recipe_id + 1
            logger.debug("Added recipe %d", recipe_id)

            save_error = self._commit(notify=True)
            return Change(matched=True, recipe=recipe.copy(), save_error=save_error)

    def edit_ingredients(self, recipe_id: int, updated_ingredients: Sequence[str]) -> Change:
        ingredients = list(updated_ingredients)

        def replace(recipe: Recipe) -> Recipe:
            if self._preserve_fields_on_edit:
                return Recipe(
                    id=recipe.id, ingredients=ingredients, method=recipe.method, time=recipe.time
                )
            return Recipe(id=recipe.id, ingredients=ingredients, method=None)

        return self._edit(recipe_id, replace, "ingredients")

    def edit_method(self, recipe_id: int, updated_method: str) -> Change:
        def replace(recipe: Recipe) -> Recipe:
            if self._preserve_fields_on_edit:
                return Recipe(
                    id=recipe.id,
                    ingredients=recipe.ingredients,
                    method=updated_method,
                    time=recipe.time,
                )
            return Recipe(id=recipe.id, ingredients=None, method=updated_method)

        return self._edit(recipe_id, replace, "method")

    def delete_recipe(self, recipe_id: int) -> Change:
        with self._lock:
            remaining = [recipe for recipe in self._recipes if recipe.id != recipe_id]
            if len(remaining) == len(self._recipes):
                return Change(matched=False)

            self._recipes = remaining
            logger.debug("Deleted recipe %d", recipe_id)
            return Change(matched=True, save_error=self._commit(notify=True))

    def _edit(self, recipe_id: int, replace: Callable[[Recipe], Recipe], field: str) -> Change:
        with self._lock:
            updated: List[Recipe] = []
            edited: Optional[Recipe] = None
            for recipe in self._recipes:
                if recipe.id == recipe_id:
                    edited = replace(recipe)
                    updated.append(edited)
                else:
                    updated.append(recipe)

            if edited is None:
                return Change(matched=False)

            self._recipes = updated
            logger.debug("Edited %s of recipe %d", field, recipe_id)
            save_error = self._commit(notify=self._notify_on_edit)
            return Change(matched=True, recipe=edited.copy(), save_error=save_error)

    def _commit(self, *, notify: bool) -> Optional[StorageWriteError]:
        if notify and self._observer is not None:
            self._observer(self.recipes)
        return self._persist()

    def _persist(self) -> Optional[StorageWriteError]:
        try:
            self._persistence.save(encode_recipes(self._recipes, self._next_id))
        except StorageWriteError as exc:
            logger.warning("Recipes changed in memory but were not saved: %s", exc)
            return exc
        return None


__all__ = ["Change", "RecipeStore", "RecipesObserver"]

import logging
from typing import Optional

from flask import Flask, flash, jsonify, redirect, request, url_for

from .config import BACKENDS, LOG_FORMAT, Settings
from .controller import RecipeController
from .models import SAMPLE_RECIPES, Recipe
from .storage import FilePersistence, Persistence
from .store import Change, RecipeStore
from .views import RecipeView

try:
    from .gcp_storage import CloudStoragePersistence, FirestorePersistence
except ImportError:  # pragma: no cover - allows running tests without optional deps
    CloudStoragePersistence = None  # type: ignore[assignment,misc]
    FirestorePersistence = None  # type: ignore[assignment,misc]

logger = logging.getLogger(__name__)


def create_app(
    persistence: Optional[Persistence] = None,
    settings: Optional[Settings] = None,
) -> Flask:
    """Create and configure the Flask application.

    Parameters
    ----------
    persistence:
        Optional storage slot for the recipe list. When ``None`` one is built
        from ``settings`` (see :func:`build_persistence`).
    settings:
        Optional settings. When ``None`` they are read from the environment.
    """

    if settings is None:
        settings = Settings.from_env()

    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO), format=LOG_FORMAT)

    app = Flask(__name__)
    app.secret_key = settings.secret_key

    if persistence is None:
        persistence = build_persistence(settings)

    store = RecipeStore(persistence, seed=SAMPLE_RECIPES if settings.seed else ())
    view = RecipeView()
    controller = RecipeController(store, view)
    app.config["RECIPE_CONTROLLER"] = controller

    @app.get("/")
    def index() -> str:
        return view.page()

    @app.get("/recipes.json")
    def list_recipes():
        return jsonify([recipe.to_dict() for recipe in store.recipes])

    @app.post("/recipes")
    def create_recipe():
        change = view.submit_recipe(request.form)
        if change is None:
            flash("Please provide ingredients or a method.", "error")
            return redirect(url_for("index"))

        _flash_outcome(change, "Recipe added.")
        return redirect(url_for("index"))

    @app.post("/recipes/<int:recipe_id>/delete")
    def delete_recipe(recipe_id: int):
        _flash_outcome(view.request_delete(recipe_id), "Recipe deleted.")
        return redirect(url_for("index"))

    @app.post("/recipes/<int:recipe_id>/ingredients")
    def update_ingredients(recipe_id: int):
        _flash_outcome(view.submit_ingredients(recipe_id, request.form), "Recipe updated.")
        return redirect(url_for("index"))

    @app.post("/recipes/<int:recipe_id>/method")
    def update_method(recipe_id: int):
        _flash_outcome(view.submit_method(recipe_id, request.form), "Recipe updated.")
        return redirect(url_for("index"))

    return app


def build_persistence(settings: Settings) -> Persistence:
    """Return the storage slot selected by ``settings.backend``."""

    if settings.backend not in BACKENDS:
        raise ValueError(
            f"Unknown recipe storage backend {settings.backend!r}; expected one of {', '.join(BACKENDS)}."
        )

    if settings.backend == "file":
        persistence = FilePersistence.in_directory(settings.data_dir, settings.key)
        logger.info("Storing recipes in %s", persistence.path)
        return persistence

    if FirestorePersistence is None or CloudStoragePersistence is None:
        raise RuntimeError(
            "google-cloud-firestore and google-cloud-storage are not installed. Install the "
            "'gcp' extra or use the file backend."
        )

    if settings.backend == "firestore":
        logger.info(
            "Storing recipes in Firestore document %s/%s", settings.collection_name, settings.key
        )
        return FirestorePersistence(
            project=settings.project,
            collection_name=settings.collection_name,
            key=settings.key,
        )

    logger.info("Storing recipes in Cloud Storage bucket %s", settings.bucket_name)
    return CloudStoragePersistence(
        bucket_name=settings.bucket_name or "",
        project=settings.project,
        key=settings.key,
    )


def _flash_outcome(change: Optional[Change], message: str) -> None:
    if change is None or not change.matched:
        flash("Recipe not found.", "error")
    elif change.save_error is not None:
        flash(f"Recipe kept on screen but could not be saved: {change.save_error}", "error")
    else:
        flash(message, "success")


__all__ = ["create_app", "build_persistence", "Recipe"]

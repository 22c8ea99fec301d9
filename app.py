import logging
import os
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()
from typing import Annotated

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict

from store import DuplicateRecipe, RecipeNotFound, RecipeStore, StorageError

RECIPES_FILE = os.getenv("RECIPES_FILE", "info.json")
STATIC_DIR   = os.getenv("STATIC_DIR", ".")
LOG_LEVEL    = os.getenv("LOG_LEVEL", "INFO")

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if root.handlers:
        return
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(handler)


setup_logging(LOG_LEVEL)

recipe_store = RecipeStore(RECIPES_FILE)


def get_store() -> RecipeStore:
    return recipe_store


class PublicFiles(StaticFiles):
    """Static files with dotfiles (.env and the like) hidden."""

    def lookup_path(self, path: str):
        if any(part.startswith(".") for part in Path(path).parts):
            return "", None
        return super().lookup_path(path)


app = FastAPI(title="Recipes")


class NewRecipe(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str


class ReplacementRecipe(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None


def error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(DuplicateRecipe)
def duplicate_recipe(request: Request, exc: DuplicateRecipe):
    return error(status.HTTP_400_BAD_REQUEST, "Recipe id already exists")


@app.exception_handler(RecipeNotFound)
def recipe_not_found(request: Request, exc: RecipeNotFound):
    return error(status.HTTP_404_NOT_FOUND, "Recipe not found")


@app.exception_handler(StorageError)
def storage_error(request: Request, exc: StorageError):
    return error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to save recipes")


@app.exception_handler(RequestValidationError)
def invalid_recipe(request: Request, exc: RequestValidationError):
    return error(status.HTTP_400_BAD_REQUEST, "Invalid recipe")


@app.exception_handler(Exception)
def unhandled(request: Request, exc: Exception):
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


@app.get("/api/recipes")
def list_recipes(store: Annotated[RecipeStore, Depends(get_store)]):
    return store.list_recipes()


@app.post("/api/recipes", status_code=201)
def create_recipe(req: NewRecipe, store: Annotated[RecipeStore, Depends(get_store)]):
    recipe = store.create(req.model_dump())
    logger.info("Created recipe %s", recipe["id"])
    return recipe


@app.put("/api/recipes/{recipe_id}")
def update_recipe(
    recipe_id: str,
    req: ReplacementRecipe,
    store: Annotated[RecipeStore, Depends(get_store)],
):
    body = req.model_dump()
    if body["id"] is None:
        body["id"] = recipe_id
    recipe = store.update(recipe_id, body)
    logger.info("Updated recipe %s", recipe_id)
    return recipe


@app.delete("/api/recipes/{recipe_id}")
def delete_recipe(recipe_id: str, store: Annotated[RecipeStore, Depends(get_store)]):
    removed = store.delete(recipe_id)
    logger.info("Deleted %d recipe(s) with id %s", removed, recipe_id)
    return {"message": "Recipe deleted"}


app.mount("/", PublicFiles(directory=STATIC_DIR, html=True), name="static")

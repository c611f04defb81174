from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ValidationError
import logging
from typing import List

from ..exceptions import FavoritesStoreError, RecipeNotFound
from ..models.recipe import Recipe
from ..services.favorites import FavoritesStore
from ..services.recipe_catalog import RecipeCatalog
from ..services.recipe_parser import RecipeParser
from .deps import get_catalog, get_favorites

log = logging.getLogger(__name__)
router = APIRouter(prefix="/api")


class RecipeText(BaseModel):
    content: str


class FavoriteStatus(BaseModel):
    recipe_id: str
    favorited: bool


@router.get("/recipes", response_model=List[Recipe])
async def list_recipes(catalog: RecipeCatalog = Depends(get_catalog)):
    return catalog.list()


@router.get("/recipes/search", response_model=List[Recipe])
async def search_recipes(q: str = "", catalog: RecipeCatalog = Depends(get_catalog)):
    return catalog.search(q)


@router.post("/recipes/parse", response_model=Recipe)
async def parse_recipe(body: RecipeText, catalog: RecipeCatalog = Depends(get_catalog)):
    """Parse pasted recipe text and make it loadable by id for this server's lifetime."""
    try:
        recipe = await RecipeParser.parse(body.content)
    except ValidationError:
        raise HTTPException(status_code=422, detail="No recipe steps found in text")
    catalog.add(recipe)
    log.info(f"Parsed recipe '{recipe.title}' as {recipe.id} ({len(recipe.steps)} steps)")
    return recipe


@router.get("/recipes/{recipe_id}", response_model=Recipe)
async def get_recipe(recipe_id: str, catalog: RecipeCatalog = Depends(get_catalog)):
    try:
        return catalog.get(recipe_id)
    except RecipeNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/favorites", response_model=List[Recipe])
async def list_favorites(
    catalog: RecipeCatalog = Depends(get_catalog),
    favorites: FavoritesStore = Depends(get_favorites),
):
    recipes = []
    for recipe_id in favorites.favorites():
        try:
            recipes.append(catalog.get(recipe_id))
        except RecipeNotFound:
            log.debug(f"Favorite {recipe_id} is no longer in the catalog")
    return recipes


@router.post("/favorites/{recipe_id}/toggle", response_model=FavoriteStatus)
async def toggle_favorite(
    recipe_id: str,
    catalog: RecipeCatalog = Depends(get_catalog),
    favorites: FavoritesStore = Depends(get_favorites),
):
    try:
        catalog.get(recipe_id)
    except RecipeNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    try:
        favorited = favorites.toggle_favorite(recipe_id)
    except FavoritesStoreError as e:
        log.error(f"Favorite toggle failed: {e}")
        raise HTTPException(status_code=500, detail="Could not save favorites")
    return FavoriteStatus(recipe_id=recipe_id, favorited=favorited)

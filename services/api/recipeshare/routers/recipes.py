"""Recipes CRUD API router.

Endpoints:
- GET /api/recipes - Search/list recipes (q, tagIds)
- POST /api/recipes - Create recipe with tags and ordered blocks
- GET /api/recipes/{id} - Get recipe with tags and blocks
- PUT /api/recipes/{id} - Replace recipe (owner or admin)
- DELETE /api/recipes/{id} - Delete recipe (owner or admin)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import require_user
from ..schemas import AuthUser, OkOut, RecipeCreated, RecipeDetail, RecipeListItem, RecipeUpsert
from ..services import recipes as repo

router = APIRouter()


def split_ids(raw: Optional[list[str]]) -> list[str]:
    """Accept ``tagIds=a,b`` as well as repeated ``tagIds=a&tagIds=b``."""
    ids = []
    for chunk in raw or []:
        ids.extend(part.strip() for part in chunk.split(",") if part.strip())
    return ids


@router.get("/recipes", response_model=list[RecipeListItem])
def list_recipes(
    q: str = Query(""),
    tag_ids: Optional[list[str]] = Query(None, alias="tagIds"),
    db: Session = Depends(get_db),
):
    """List recipes matching ``q`` and carrying every tag in ``tagIds``."""
    return repo.list_recipes(db, q=q, tag_ids=split_ids(tag_ids))


@router.get("/recipes/{recipe_id}", response_model=RecipeDetail)
def get_recipe(recipe_id: str, db: Session = Depends(get_db)):
    return repo.get_recipe_detail(db, recipe_id)


@router.post("/recipes", response_model=RecipeCreated)
def create_recipe(
    payload: RecipeUpsert,
    user: AuthUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    return RecipeCreated(id=repo.create_recipe(db, payload, user))


@router.put("/recipes/{recipe_id}", response_model=OkOut)
def update_recipe(
    recipe_id: str,
    payload: RecipeUpsert,
    user: AuthUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Replace the recipe's name, tags and blocks. Not a merge."""
    repo.update_recipe(db, recipe_id, payload, user)
    return OkOut()


@router.delete("/recipes/{recipe_id}", response_model=OkOut)
def delete_recipe(
    recipe_id: str,
    user: AuthUser = Depends(require_user),
    db: Session = Depends(get_db),
):
    repo.delete_recipe(db, recipe_id, user)
    return OkOut()

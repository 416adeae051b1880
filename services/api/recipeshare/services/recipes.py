"""Recipe repository and search.

A recipe's tags and blocks are always written as a complete set. Create,
update and delete each commit exactly once, so a failure anywhere rolls the
whole write back and no recipe is left with a mixed block/tag state.
"""

import logging
from typing import Iterable, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from ..deps import can_edit
from ..errors import Forbidden, NotFound, ServerError
from ..models import Block, BlockType, Recipe, Tag, utcnow
from ..schemas import (
    AuthUser,
    BlockOut,
    RecipeDetail,
    RecipeListItem,
    RecipeUpsert,
    TagOut,
)
from .tags import resolve_tags

logger = logging.getLogger("recipeshare.recipes")


def _build_blocks(payload: RecipeUpsert) -> list[Block]:
    """Blocks numbered 0..n-1 in submitted order."""
    blocks = []
    for idx, b in enumerate(payload.blocks):
        if b.type == BlockType.TEXT.value:
            blocks.append(Block(order=idx, type=BlockType.TEXT.value, text=b.text))
        else:
            blocks.append(Block(order=idx, type=BlockType.PHOTO.value, photo_url=b.photo_url))
    return blocks


def _commit(db: Session, action: str, recipe_id: Optional[str] = None) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to {action} recipe {recipe_id or ''}".rstrip())
        raise ServerError()


def _get_for_write(db: Session, recipe_id: str, user: AuthUser) -> Recipe:
    """Load a recipe for mutation: NotFound first, then the owner/admin check."""
    recipe = db.query(Recipe).filter(Recipe.id == recipe_id).first()
    if not recipe:
        raise NotFound()
    if not can_edit(user, recipe.owner_id):
        raise Forbidden()
    return recipe


def create_recipe(db: Session, payload: RecipeUpsert, user: AuthUser) -> str:
    """Create a recipe owned by ``user`` and return its id."""
    try:
        tags = resolve_tags(db, payload.tags)
        recipe = Recipe(
            name=payload.name,
            owner_id=user.id,
            tags=tags,
            blocks=_build_blocks(payload),
        )
        db.add(recipe)
        db.flush()
        recipe_id = recipe.id
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create recipe")
        raise ServerError()

    _commit(db, "create", recipe_id)
    logger.info(f"Recipe {recipe_id} created by {user.id}")
    return recipe_id


def update_recipe(db: Session, recipe_id: str, payload: RecipeUpsert, user: AuthUser) -> None:
    """Replace name, tag set and block set of a recipe in one transaction."""
    recipe = _get_for_write(db, recipe_id, user)

    try:
        tags = resolve_tags(db, payload.tags)

        # Old blocks go first so the (recipe_id, order) constraint never sees both sets
        recipe.blocks.clear()
        db.flush()

        recipe.name = payload.name
        recipe.tags = tags
        recipe.blocks = _build_blocks(payload)
        recipe.updated_at = utcnow()
        db.flush()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to update recipe {recipe_id}")
        raise ServerError()

    _commit(db, "update", recipe_id)
    logger.info(f"Recipe {recipe_id} updated by {user.id}")


def delete_recipe(db: Session, recipe_id: str, user: AuthUser) -> None:
    """Delete a recipe with its blocks and tag links; the tags themselves stay."""
    recipe = _get_for_write(db, recipe_id, user)
    db.delete(recipe)
    _commit(db, "delete", recipe_id)
    logger.info(f"Recipe {recipe_id} deleted by {user.id}")


def _tags_out(tags: Iterable[Tag]) -> list[TagOut]:
    return [TagOut.model_validate(t) for t in tags]


def get_recipe_detail(db: Session, recipe_id: str) -> RecipeDetail:
    recipe = (
        db.query(Recipe)
        .options(
            joinedload(Recipe.owner),
            selectinload(Recipe.tags),
            selectinload(Recipe.blocks),
        )
        .filter(Recipe.id == recipe_id)
        .first()
    )
    if not recipe:
        raise NotFound()

    return RecipeDetail(
        id=recipe.id,
        name=recipe.name,
        owner_id=recipe.owner_id,
        owner_display_name=recipe.owner.display_name,
        tags=_tags_out(recipe.tags),
        blocks=[BlockOut.model_validate(b) for b in recipe.blocks],
    )


def list_recipes(
    db: Session,
    q: str = "",
    tag_ids: Optional[Iterable[str]] = None,
) -> list[RecipeListItem]:
    """Search recipes, most recently modified first.

    ``q`` matches the recipe name or any tag name (case-insensitive substring).
    Every id in ``tag_ids`` must be attached to the recipe.
    """
    query = db.query(Recipe).options(
        joinedload(Recipe.owner),
        selectinload(Recipe.tags),
        selectinload(Recipe.blocks),
    )

    q = (q or "").strip()
    if q:
        query = query.filter(
            or_(
                Recipe.name.icontains(q, autoescape=True),
                Recipe.tags.any(Tag.name.icontains(q, autoescape=True)),
            )
        )

    for tag_id in dict.fromkeys(tag_ids or []):
        query = query.filter(Recipe.tags.any(Tag.id == tag_id))

    recipes = query.order_by(Recipe.updated_at.desc(), Recipe.id).all()

    return [
        RecipeListItem(
            id=r.id,
            name=r.name,
            owner_id=r.owner_id,
            owner_display_name=r.owner.display_name,
            tags=_tags_out(r.tags),
            first_photo_url=r.first_photo_url,
        )
        for r in recipes
    ]

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import TagOut
from ..services.tags import search_tags

router = APIRouter()


@router.get("/tags", response_model=list[TagOut])
def list_tags(q: str = Query(""), db: Session = Depends(get_db)):
    """Tags whose name contains ``q``, for the editor's tag picker."""
    return search_tags(db, q)

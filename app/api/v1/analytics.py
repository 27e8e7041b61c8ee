from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.core.access import ensure_event_access
from app.models.user import User
from app.schemas.analytics import HierarchyRow
from app.services import analytics

router = APIRouter()


@router.get("/hierarchy/{event_id}", response_model=List[HierarchyRow])
def hierarchy(
    event_id: str,
    level: str = Query(..., pattern="^(county|constituency|ward|group)$"),
    parent_name: Optional[str] = Query(None, alias="parentName"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    ensure_event_access(db, event_id, user)
    return analytics.hierarchy_breakdown(db, event_id, level, parent_name)

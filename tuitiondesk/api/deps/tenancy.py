from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional, Dict, Any
from uuid import UUID

from tuitiondesk.core.db import get_db, set_rls_context
from tuitiondesk.models.center import Center


def parse_center_id(raw: Optional[str]) -> UUID:
    if not raw or not raw.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Center-ID header is required"
        )
    try:
        return UUID(raw.strip())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid center ID"
        )


def require_center(
    db: Session = Depends(get_db),
    x_center_id: Optional[str] = Header(default=None, alias="X-Center-ID"),
) -> Dict[str, Any]:
    """
    Resolve the active center for the request and return context dict
    """
    center_id = parse_center_id(x_center_id)

    center = db.get(Center, center_id)
    if not center:
        raise HTTPException(status_code=404, detail="Center not found")
    if not center.is_active:
        raise HTTPException(status_code=403, detail="Center is inactive")

    set_rls_context(db, center_id=center_id)

    return {"center": center, "center_id": center_id}

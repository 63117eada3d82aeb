from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from ...runtime import Session, get_session
from ...schemas import SessionResponse


router = APIRouter(tags=["session"])


@router.get("/session", response_model=SessionResponse)
async def read_session(session: Session = Depends(get_session)):
    return SessionResponse(data=session.to_dict())


@router.put("/session", response_model=SessionResponse)
async def update_session(
    payload: Dict[str, Any] = Body(...),
    session: Session = Depends(get_session),
):
    """Merge ``payload`` into the session; a ``null`` value removes the key."""
    for key, value in payload.items():
        if value is None:
            session.pop(key, None)
        else:
            session[key] = value
    return SessionResponse(data=session.to_dict())


@router.post("/logout", response_model=SessionResponse)
async def logout(session: Session = Depends(get_session)):
    session.destroy()
    return SessionResponse()

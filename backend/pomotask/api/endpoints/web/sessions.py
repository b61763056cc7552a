# backend/pomotask/api/endpoints/web/sessions.py
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from pomotask.api.deps import get_current_user_id
from pomotask.crud import sessions as session_crud
from pomotask.schemas.session import SessionCreate, SessionHistory, SessionRead

router = APIRouter()


@router.post("/start", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
async def start_session(data: SessionCreate, user_id: str = Depends(get_current_user_id)):
    """
    Opens a focus or break session. 404 when taskId is not one of the caller's tasks.
    """
    return await session_crud.start_session(user_id, data)


@router.put("/{session_id}/complete", response_model=SessionRead)
async def complete_session(session_id: str, user_id: str = Depends(get_current_user_id)):
    """
    Marks a session complete; a focus session bound to a task credits
    ceil(duration / 60) minutes to that task, once.
    """
    session = await session_crud.complete_session(user_id, session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


@router.get("/history", response_model=SessionHistory)
async def session_history(
    day: date = Query(..., alias="date"),
    user_id: str = Depends(get_current_user_id),
):
    return await session_crud.get_session_history(user_id, day)

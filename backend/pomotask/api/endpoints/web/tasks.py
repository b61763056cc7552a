# backend/pomotask/api/endpoints/web/tasks.py
from datetime import date
from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from pomotask.api.deps import get_current_user_id
from pomotask.crud import tasks as task_crud
from pomotask.schemas.common import Message
from pomotask.schemas.task import TaskCreate, TaskHistoryRead, TaskRead, TaskStats, TaskUpdate

router = APIRouter()


# READ ALL (today)
@router.get("", response_model=List[TaskRead])
async def read_tasks(user_id: str = Depends(get_current_user_id)):
    return await task_crud.get_tasks_for_day(user_id)


# HISTORY
@router.get("/history", response_model=List[TaskHistoryRead])
async def read_task_history(
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    user_id: str = Depends(get_current_user_id),
):
    if end_date < start_date:
        raise HTTPException(status_code=400, detail="endDate must not be before startDate")
    return await task_crud.get_task_history(user_id, start_date, end_date)


# STATS
@router.get("/stats", response_model=TaskStats)
async def read_task_stats(
    period: Literal["day", "week", "month"] = Query(...),
    user_id: str = Depends(get_current_user_id),
):
    return await task_crud.get_task_stats(user_id, period)


# CREATE
@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(task: TaskCreate, user_id: str = Depends(get_current_user_id)):
    return await task_crud.create_task(user_id, task)


# READ ONE
@router.get("/{task_id}", response_model=TaskRead)
async def read_task(task_id: str, user_id: str = Depends(get_current_user_id)):
    task = await task_crud.get_task(user_id, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


# UPDATE (including completion)
@router.put("/{task_id}", response_model=TaskRead)
async def update_task(task_id: str, task: TaskUpdate, user_id: str = Depends(get_current_user_id)):
    updated = await task_crud.update_task(user_id, task_id, task)
    if not updated:
        raise HTTPException(status_code=404, detail="Task not found")
    return updated


# DELETE
@router.delete("/{task_id}", response_model=Message)
async def delete_task(task_id: str, user_id: str = Depends(get_current_user_id)):
    deleted = await task_crud.delete_task(user_id, task_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Task not found")
    return Message(message="Task deleted successfully")

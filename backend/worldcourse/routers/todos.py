"""Personal todo list endpoints."""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from worldcourse.auth.models import User
from worldcourse.auth.service import get_current_active_user
from worldcourse.database import get_db
from worldcourse.schemas.todo import (
    TaskCreate, TaskOut, TaskUpdate, TodoListCreate, TodoListOut, TodoListUpdate,
)
from worldcourse.services.todos import TodoService

router = APIRouter(prefix="/api/todos", tags=["Todos"])


def get_todo_service(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
) -> TodoService:
    return TodoService(db, current_user)


@router.get("", response_model=list[TodoListOut])
async def list_todo_lists(service: TodoService = Depends(get_todo_service)):
    return service.lists()


@router.post("", response_model=TodoListOut, status_code=status.HTTP_201_CREATED)
async def create_todo_list(data: TodoListCreate, service: TodoService = Depends(get_todo_service)):
    return service.create(data)


@router.get("/{list_id}", response_model=TodoListOut)
async def read_todo_list(list_id: int, service: TodoService = Depends(get_todo_service)):
    return service.get(list_id)


@router.put("/{list_id}", response_model=TodoListOut)
async def update_todo_list(list_id: int, changes: TodoListUpdate, service: TodoService = Depends(get_todo_service)):
    return service.update(list_id, changes)


@router.delete("/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_todo_list(list_id: int, service: TodoService = Depends(get_todo_service)):
    service.delete(list_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{list_id}/tasks", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
async def add_task(list_id: int, data: TaskCreate, service: TodoService = Depends(get_todo_service)):
    return service.add_task(list_id, data)


@router.put("/{list_id}/tasks/{task_id}", response_model=TaskOut)
async def update_task(
    list_id: int,
    task_id: int,
    changes: TaskUpdate,
    service: TodoService = Depends(get_todo_service)
):
    return service.update_task(list_id, task_id, changes)


@router.patch("/{list_id}/tasks/{task_id}/toggle", response_model=TaskOut)
async def toggle_task(list_id: int, task_id: int, service: TodoService = Depends(get_todo_service)):
    """Flip a task between done and open."""
    return service.toggle_task(list_id, task_id)


@router.delete("/{list_id}/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(list_id: int, task_id: int, service: TodoService = Depends(get_todo_service)):
    service.delete_task(list_id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

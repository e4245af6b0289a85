"""Personal todo lists; every operation is scoped to the owning user."""
import logging

from sqlalchemy.orm import Session

from worldcourse.auth.models import User
from worldcourse.errors import NotFound
from worldcourse.models import Task, TodoList
from worldcourse.schemas.todo import TaskCreate, TaskUpdate, TodoListCreate, TodoListUpdate
from worldcourse.utils import ensure_utc, utcnow

logger = logging.getLogger(__name__)


class TodoService:
    def __init__(self, db: Session, owner: User):
        self.db = db
        self.owner = owner

    def lists(self) -> list[TodoList]:
        return (
            self.db.query(TodoList)
            .filter(TodoList.user_id == self.owner.id)
            .order_by(TodoList.created_at.desc(), TodoList.id.desc())
            .all()
        )

    def get(self, list_id: int) -> TodoList:
        # Other users' lists look exactly like missing ones
        todo = (
            self.db.query(TodoList)
            .filter(TodoList.id == list_id, TodoList.user_id == self.owner.id)
            .first()
        )
        if todo is None:
            raise NotFound("Todo list not found")
        return todo

    def create(self, data: TodoListCreate) -> TodoList:
        todo = TodoList(user_id=self.owner.id, title=data.title, description=data.description)
        self.db.add(todo)
        self.db.commit()
        self.db.refresh(todo)
        return todo

    def update(self, list_id: int, changes: TodoListUpdate) -> TodoList:
        todo = self.get(list_id)
        for name, value in changes.model_dump(exclude_unset=True).items():
            setattr(todo, name, value)
        self.db.commit()
        self.db.refresh(todo)
        return todo

    def delete(self, list_id: int) -> None:
        todo = self.get(list_id)
        self.db.delete(todo)
        self.db.commit()
        logger.info(f"User {self.owner.id} deleted todo list {list_id}")

    def _task(self, todo: TodoList, task_id: int) -> Task:
        for task in todo.tasks:
            if task.id == task_id:
                return task
        raise NotFound("Task not found")

    def add_task(self, list_id: int, data: TaskCreate) -> Task:
        todo = self.get(list_id)
        task = Task(
            title=data.title,
            description=data.description,
            priority=data.priority,
            due_date=ensure_utc(data.due_date),
            position=len(todo.tasks),
        )
        todo.tasks.append(task)
        self.db.commit()
        self.db.refresh(task)
        return task

    def update_task(self, list_id: int, task_id: int, changes: TaskUpdate) -> Task:
        task = self._task(self.get(list_id), task_id)
        fields = changes.model_dump(exclude_unset=True)
        if "due_date" in fields:
            fields["due_date"] = ensure_utc(fields["due_date"])
        if "completed" in fields:
            self._set_completed(task, bool(fields.pop("completed")))
        for name, value in fields.items():
            setattr(task, name, value)
        self.db.commit()
        self.db.refresh(task)
        return task

    def toggle_task(self, list_id: int, task_id: int) -> Task:
        task = self._task(self.get(list_id), task_id)
        self._set_completed(task, not task.completed)
        self.db.commit()
        self.db.refresh(task)
        return task

    def delete_task(self, list_id: int, task_id: int) -> None:
        todo = self.get(list_id)
        task = self._task(todo, task_id)
        todo.tasks.remove(task)
        for position, remaining in enumerate(todo.tasks):
            remaining.position = position
        self.db.commit()

    @staticmethod
    def _set_completed(task: Task, completed: bool) -> None:
        task.completed = completed
        task.completed_at = utcnow() if completed else None

"""Task CRUD endpoints."""

from fastapi import APIRouter, Request, Response, status
from pydantic import BaseModel, Field, StrictBool, StrictStr

from taskgraph.models.task import Task
from taskgraph.service.task_service import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


class TaskCreateRequest(BaseModel):
    """Request body for task creation."""

    title: StrictStr = Field(..., description="Task title")
    id: StrictStr | None = Field(None, description="Task id; generated when empty")
    parent_id: StrictStr | None = Field(None, description="Id of an existing parent task")
    completed: StrictBool = Field(False, description="Ignored; new tasks start incomplete")


class TaskUpdateRequest(BaseModel):
    """Request body for task update. Both fields are required."""

    title: StrictStr
    completed: StrictBool


class TaskResponse(BaseModel):
    """A single task."""

    id: str
    title: str
    completed: bool
    parent_id: str | None = None

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls(**task.to_dict())


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


def get_service(request: Request) -> TaskService:
    """Get the task service attached to the application."""
    return request.app.state.service


@router.get("", response_model=list[TaskResponse])
def list_tasks(request: Request) -> list[TaskResponse]:
    """List all tasks."""
    tasks = get_service(request).list_tasks()
    return [TaskResponse.from_task(task) for task in tasks]


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(payload: TaskCreateRequest, request: Request) -> TaskResponse:
    """Create a task."""
    task = Task(
        id=payload.id or "",
        title=payload.title,
        completed=payload.completed,
        parent_id=payload.parent_id,
    )
    created = get_service(request).create_task(task)
    return TaskResponse.from_task(created)


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: str, request: Request) -> TaskResponse:
    """Get a task by id."""
    return TaskResponse.from_task(get_service(request).get_task(task_id))


@router.put("/{task_id}", response_model=MessageResponse)
def update_task(task_id: str, payload: TaskUpdateRequest, request: Request) -> MessageResponse:
    """Update a task's title and completion flag."""
    get_service(request).update_task(task_id, payload.title, payload.completed)
    return MessageResponse(message="Task updated successfully")


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, request: Request) -> Response:
    """Delete a task and its direct children."""
    get_service(request).delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

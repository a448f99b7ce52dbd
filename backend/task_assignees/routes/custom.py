import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from task_assignees.database.deps import get_assignee_store
from task_assignees.schemas.task_assignee import HelloOut, TaskAssigneeInfo, TaskAssigneeSet
from task_assignees.services.assignee_store import AssigneeStorageError, AssigneeStore

logger = logging.getLogger("uvicorn.error")

router = APIRouter(tags=["Custom"])


@router.get("/hello", response_model=HelloOut)
def hello():
    logger.info("Endpoint hello das extensões chamado")
    return HelloOut(message="Olá das extensões personalizadas!", feature_enabled=True)


@router.get("/tasks/{task_id}/assignee", response_model=TaskAssigneeInfo)
def get_task_assignee(
    task_id: UUID,
    store: AssigneeStore = Depends(get_assignee_store)
):
    try:
        record = store.get(task_id)
    except AssigneeStorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Falha ao consultar responsável da tarefa",
        )
    return TaskAssigneeInfo(task_id=task_id, assignee=record.assignee if record else None)


@router.put("/tasks/{task_id}/assignee", response_model=TaskAssigneeInfo)
def set_task_assignee(
    task_id: UUID,
    payload: TaskAssigneeSet,
    store: AssigneeStore = Depends(get_assignee_store)
):
    try:
        record = store.upsert(task_id, payload.assignee)
    except AssigneeStorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Falha ao definir responsável da tarefa",
        )
    logger.info("Responsável '%s' definido para a tarefa %s", record.assignee, task_id)
    return TaskAssigneeInfo(task_id=record.task_id, assignee=record.assignee)


@router.delete("/tasks/{task_id}/assignee", status_code=status.HTTP_204_NO_CONTENT)
def delete_task_assignee(
    task_id: UUID,
    store: AssigneeStore = Depends(get_assignee_store)
):
    try:
        store.delete(task_id)
    except AssigneeStorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Falha ao remover responsável da tarefa",
        )
    logger.info("Responsável removido da tarefa %s", task_id)
    return None

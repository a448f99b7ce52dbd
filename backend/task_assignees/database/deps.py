from fastapi import Request

from task_assignees.services.assignee_store import AssigneeStore


def get_assignee_store(request: Request) -> AssigneeStore:
    return request.app.state.assignee_store

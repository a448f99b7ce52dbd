from task_assignees.models.task_assignee import TaskAssignee  # noqa: F401

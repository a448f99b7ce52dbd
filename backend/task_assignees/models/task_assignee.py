from sqlalchemy import Column, DateTime, String, Uuid
from task_assignees.database.base import Base


class TaskAssignee(Base):
    __tablename__ = "task_assignees"

    # Sem ForeignKey para tasks: registros órfãos são tolerados
    task_id = Column(Uuid, primary_key=True)
    assignee = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

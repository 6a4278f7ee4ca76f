from .unit_of_work import SqlAlchemyUnitOfWork, InMemoryUnitOfWork
from .workflow_service import WebhookWorkflowService

__all__ = [
    "SqlAlchemyUnitOfWork",
    "InMemoryUnitOfWork",
    "WebhookWorkflowService",
]

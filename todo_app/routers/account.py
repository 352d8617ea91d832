"""Account router: profile summary and account deletion."""
from fastapi import APIRouter, Depends

from todo_app.schemas.account import AccountDeleteResponse, AccountResponse
from todo_app.services.task_service import TaskService
from todo_app.middleware.auth import get_current_user, CurrentUser
from todo_app.routers.tasks import get_task_service
from todo_app.utils.logger import get_logger

router = APIRouter(tags=["Account"])

logger = get_logger(__name__)


@router.get("/account", response_model=AccountResponse)
async def get_account(
    current_user: CurrentUser = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Profile summary: who is signed in and how many tasks they have."""
    return AccountResponse(
        owner=current_user.owner,
        email=current_user.email,
        task_count=service.count(),
    )


@router.delete("/account", response_model=AccountDeleteResponse)
async def delete_account(service: TaskService = Depends(get_task_service)):
    """Delete every task of the authenticated owner."""
    deleted = service.delete_all()
    logger.info("Account deleted", owner=service.owner, tasks_deleted=deleted)
    return AccountDeleteResponse(deleted=deleted)

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from notesync.core.schemas.auth import AuthUser  # noqa: TCH001
from notesync.core.services.account_deletion_service import (  # noqa: TCH001
    AccountDeletionResult,
    AccountDeletionService,
)
from notesync.dependencies import get_account_deletion_service, get_current_user
from notesync.errors import BackendError
from notesync.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(
    responses={
        401: {"description": "Unauthorized"},
        500: {"description": "Deletion failed"},
    }
)


@router.post("/delete", response_model=AccountDeletionResult)
async def delete_account(
    current_user: AuthUser = Depends(get_current_user),
    service: AccountDeletionService = Depends(get_account_deletion_service),
):
    """Delete the caller's account and every row they own."""
    try:
        return await service.delete_user(current_user.id)
    except BackendError as err:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=err.message,
        ) from err
    except Exception as err:
        logger.error("Unexpected error during account deletion", extra={"error": str(err)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from err

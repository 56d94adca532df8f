"""
Client messages to the team
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.core.logging_config import logger
from app.models.user import User
from app.models.message import Message
from app.schemas.message import MessageCreate, MessageResponse
from app.modules.auth.dependencies import get_current_admin, require_permission
from app.services.crud_service import message_crud

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    message_data: MessageCreate,
    current_user: User = Depends(require_permission("messages", "create")),
    db: AsyncSession = Depends(get_db)
):
    if not current_user.client_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No client account linked to this user"
        )

    message = await message_crud.create(db, {
        "client_id": current_user.client_id,
        "message": message_data.message,
    })
    logger.info(f"[Messages] Message from client {current_user.client_id}")
    return message


@router.get("", response_model=List[MessageResponse])
async def list_messages(
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db)
):
    return await message_crud.list(db, order_by=Message.created_at.desc())

# endpoints/api_messages.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from dependency_injector.wiring import inject, Provide

from dtos import MessageDTO
from containers import Container
from repositories.chat_repo import ChatRepository
from repositories.message_repo import MessageRepository
from .utils import require_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chats", tags=["messages"])


@router.get("/{chat_id}/messages", response_model=List[MessageDTO])
@inject
async def get_messages(
    chat_id: str,
    user_id: str = Depends(require_user_id),
    cr: ChatRepository = Depends(Provide[Container.chat_repo]),
    mr: MessageRepository = Depends(Provide[Container.message_repo])
):
    if not chat_id.strip():
        raise HTTPException(status_code=400, detail="Chat ID required")

    try:
        # a chat owned by someone else looks exactly like a missing one
        chat = await cr.get_chat_for_user(chat_id, user_id)
        if chat is None:
            raise HTTPException(status_code=404, detail="Chat not found")
        msgs = await mr.get_messages_for_chat(chat_id)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Get messages error")
        raise HTTPException(status_code=500, detail="Internal Server Error")
    return [MessageDTO.model_validate(m) for m in msgs]

# endpoints/api_chats.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from dependency_injector.wiring import inject, Provide

from dtos import ChatCreateDTO, ChatDTO, DeleteResultDTO
from containers import Container
from repositories.chat_repo import ChatRepository
from .utils import require_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chats", tags=["chats"])


@router.get("", response_model=List[ChatDTO])
@inject
async def list_chats(
    user_id: str = Depends(require_user_id),
    cr: ChatRepository = Depends(Provide[Container.chat_repo])
):
    """Chats of the caller, most recently active first."""
    try:
        chats = await cr.list_chats_for_user(user_id)
    except Exception:
        logger.exception("Get chats error")
        raise HTTPException(status_code=500, detail="Internal Server Error")
    return [ChatDTO.model_validate(c) for c in chats]


@router.post("", response_model=ChatDTO)
@inject
async def create_chat(
    payload: Optional[ChatCreateDTO] = Body(None),
    user_id: str = Depends(require_user_id),
    cr: ChatRepository = Depends(Provide[Container.chat_repo])
):
    title = payload.title if payload else None
    try:
        chat = await cr.create_chat(user_id=user_id, title=title)
    except Exception:
        logger.exception("Create chat error")
        raise HTTPException(status_code=500, detail="Internal Server Error")
    logger.info("Created chat %s for %s", chat.id, user_id)
    return ChatDTO.model_validate(chat)


@router.delete("", response_model=DeleteResultDTO)
@inject
async def delete_chat(
    chat_id: Optional[str] = Query(None, alias="chatId"),
    user_id: str = Depends(require_user_id),
    cr: ChatRepository = Depends(Provide[Container.chat_repo])
):
    if not chat_id:
        raise HTTPException(status_code=400, detail="Chat ID required")

    try:
        chat = await cr.get_chat(chat_id)
        if chat is None:
            raise HTTPException(status_code=404, detail="Chat not found")
        if chat.user_id != user_id:
            raise HTTPException(status_code=403, detail="Unauthorized")
        await cr.delete_chat(chat_id)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Delete chat error")
        raise HTTPException(status_code=500, detail="Internal Server Error")

    logger.info("Deleted chat %s", chat_id)
    return DeleteResultDTO(success=True)

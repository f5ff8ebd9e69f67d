# endpoints/chat_stream.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from dependency_injector.wiring import inject, Provide

from dtos import ChatTurnRequestDTO
from containers import Container
from models import MessageRole
from services.chat_service import ChatService
from .utils import require_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat", response_class=StreamingResponse)
@inject
async def chat_turn(
    payload: ChatTurnRequestDTO,
    user_id: str = Depends(require_user_id),
    chat_service: ChatService = Depends(Provide[Container.chat_service])
):
    """
    Relays the model's reply to the conversation as plain text while it is
    generated. With a chatId, the last user turn is stored up front and the
    full reply once the stream has ended.
    """
    chat_id = payload.chat_id
    try:
        if chat_id:
            await chat_service.get_owned_chat(chat_id, user_id)
            await chat_service.record_turn(chat_id, MessageRole.USER, payload.messages[-1].content)

        deltas = await chat_service.start_reply(payload.messages, chat_id)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Chat API error")
        raise HTTPException(status_code=500, detail="Internal Server Error")

    return StreamingResponse(deltas, media_type="text/plain; charset=utf-8")

# services/chat_service.py
import asyncio
import logging
from typing import AsyncGenerator, AsyncIterator, List, Optional, Set

import httpx
from fastapi import HTTPException
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from dtos import TurnDTO
from models import Chat, Message, MessageRole
from prompts import SYSTEM_PROMPT
from repositories.chat_repo import ChatRepository
from repositories.message_repo import MessageRepository

logger = logging.getLogger(__name__)

_CONNECTION_HINTS = ("connection refused", "failed to connect", "all connection attempts failed")

# model streams still being read; holds the tasks until they finish
_reply_tasks: Set["asyncio.Task[None]"] = set()

_END = None


def _forget_task(task: "asyncio.Task[None]") -> None:
    _reply_tasks.discard(task)
    if not task.cancelled() and task.exception() is not None:
        logger.error("Reply task failed", exc_info=task.exception())


async def drain_reply_tasks() -> None:
    """Waits until every model stream started so far has been read and saved."""
    if _reply_tasks:
        await asyncio.gather(*list(_reply_tasks), return_exceptions=True)


def is_connection_failure(exc: BaseException) -> bool:
    """
    Best guess whether the model server is simply not running. Walks the
    exception chain, since client libraries wrap the transport error.
    """
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, (ConnectionError, httpx.ConnectError)):
            return True
        message = str(current).lower()
        if any(hint in message for hint in _CONNECTION_HINTS):
            return True
        current = current.__cause__ or current.__context__
    return False


def to_lc_messages(turns: List[TurnDTO], system_prompt: str) -> List[BaseMessage]:
    messages: List[BaseMessage] = [SystemMessage(content=system_prompt)]
    for turn in turns:
        if turn.role == MessageRole.USER:
            messages.append(HumanMessage(content=turn.content))
        else:
            messages.append(AIMessage(content=turn.content))
    return messages


class ChatService:
    """
    One chat turn: ownership check, user turn recording, streaming the model
    reply and recording it once the stream is complete.
    """

    def __init__(
        self,
        chat_repo: ChatRepository,
        message_repo: MessageRepository,
        llm: BaseChatModel,
        system_prompt: str = SYSTEM_PROMPT,
    ):
        self.chat_repo = chat_repo
        self.message_repo = message_repo
        self.llm = llm
        self.system_prompt = system_prompt

    async def get_owned_chat(self, chat_id: str, user_id: str) -> Chat:
        chat = await self.chat_repo.get_chat(chat_id)
        if chat is None:
            raise HTTPException(status_code=404, detail="Chat not found")
        if chat.user_id != user_id:
            raise HTTPException(status_code=403, detail="Unauthorized access to chat")
        return chat

    async def record_turn(self, chat_id: str, role: MessageRole, content: str) -> Optional[Message]:
        """Saves a turn; a failed write is logged and the conversation goes on."""
        try:
            return await self.message_repo.add_message(chat_id=chat_id, role=role, content=content)
        except Exception:
            logger.exception("Failed to save %s message for chat %s", role.value, chat_id)
            return None

    async def start_reply(self, turns: List[TurnDTO], chat_id: Optional[str] = None) -> AsyncIterator[str]:
        """
        Opens the model stream and waits for the first delta, so that an
        unreachable model server surfaces here as a 503 and not as a broken
        response body. Returns the iterator to relay to the client.

        The rest of the stream is read by a background task, which saves the
        reply when the model is done even if the client has gone away.
        """
        upstream = self._deltas(turns)
        try:
            first = await upstream.__anext__()
        except StopAsyncIteration:
            first = None
        except Exception as e:
            if is_connection_failure(e):
                logger.warning("Model endpoint unreachable: %s", e)
                raise HTTPException(
                    status_code=503,
                    detail="AI service unavailable. Please ensure Ollama is running.",
                )
            raise

        queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue()
        task = asyncio.create_task(self._pump(chat_id, first, upstream, queue))
        _reply_tasks.add(task)
        task.add_done_callback(_forget_task)
        return self._relay(queue)

    async def _deltas(self, turns: List[TurnDTO]) -> AsyncGenerator[str, None]:
        async for chunk in self.llm.astream(to_lc_messages(turns, self.system_prompt)):
            text = chunk.content if isinstance(chunk.content, str) else ""
            if text:
                yield text

    async def _pump(
        self,
        chat_id: Optional[str],
        first: Optional[str],
        upstream: AsyncGenerator[str, None],
        queue: "asyncio.Queue[Optional[str]]",
    ) -> None:
        parts: List[str] = []
        try:
            if first is not None:
                parts.append(first)
                queue.put_nowait(first)
                async for delta in upstream:
                    parts.append(delta)
                    queue.put_nowait(delta)
        except Exception:
            # the response has already started, so the stream just ends here
            logger.exception("Model stream failed after %d deltas", len(parts))
            queue.put_nowait(_END)
            return

        await self._on_finish(chat_id, "".join(parts))
        queue.put_nowait(_END)

    async def _relay(self, queue: "asyncio.Queue[Optional[str]]") -> AsyncIterator[str]:
        # stops early when the client disconnects; the pump keeps going
        while True:
            delta = await queue.get()
            if delta is _END:
                return
            yield delta

    async def _on_finish(self, chat_id: Optional[str], text: str) -> None:
        if not chat_id:
            return
        try:
            await self.message_repo.add_message(chat_id=chat_id, role=MessageRole.ASSISTANT, content=text)
            await self.chat_repo.touch_chat(chat_id)
        except Exception:
            logger.exception("Failed to save assistant message for chat %s", chat_id)

# repositories/chat_repo.py
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy import select, delete, update
from models import Chat, Message, DEFAULT_CHAT_TITLE, utcnow
from typing import List, Optional


class ChatRepository:
    """
    Chats of a user. Every call is its own unit of work on a fresh session
    taken from the shared session factory.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def create_chat(self, user_id: str, title: Optional[str] = None) -> Chat:
        if not title or not title.strip():
            title = DEFAULT_CHAT_TITLE
        chat = Chat(user_id=user_id, title=title)
        async with self.session_factory() as session:
            session.add(chat)
            await session.commit()
            await session.refresh(chat)
        return chat

    async def list_chats_for_user(self, user_id: str) -> List[Chat]:
        async with self.session_factory() as session:
            q = await session.execute(
                select(Chat).where(Chat.user_id == user_id).order_by(Chat.updated_at.desc())
            )
            return list(q.scalars().all())

    async def get_chat(self, chat_id: str) -> Optional[Chat]:
        async with self.session_factory() as session:
            return await session.get(Chat, chat_id)

    async def get_chat_for_user(self, chat_id: str, user_id: str) -> Optional[Chat]:
        """Existence and ownership in one lookup, so the two are not told apart."""
        async with self.session_factory() as session:
            q = await session.execute(
                select(Chat).where(Chat.id == chat_id, Chat.user_id == user_id).limit(1)
            )
            return q.scalars().first()

    async def touch_chat(self, chat_id: str) -> None:
        async with self.session_factory() as session:
            await session.execute(
                update(Chat).where(Chat.id == chat_id).values(updated_at=utcnow())
            )
            await session.commit()

    async def delete_chat(self, chat_id: str) -> bool:
        """
        Deletes the messages of the chat and then the chat in one transaction.
        Returns False when nothing was deleted.
        """
        async with self.session_factory() as session:
            async with session.begin():
                await session.execute(delete(Message).where(Message.chat_id == chat_id))
                result = await session.execute(delete(Chat).where(Chat.id == chat_id))
        return result.rowcount > 0

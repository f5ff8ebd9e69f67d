from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.future import select
from models import Message, MessageRole
from typing import List


class MessageRepository:
    """
    Chat turns. Messages are immutable once written.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def add_message(self, chat_id: str, role: MessageRole, content: str) -> Message:
        """Stores one turn of a chat."""
        message = Message(chat_id=chat_id, role=role, content=content)
        async with self.session_factory() as session:
            session.add(message)
            await session.commit()
            await session.refresh(message)
        return message

    async def get_messages_for_chat(self, chat_id: str) -> List[Message]:
        """
        All messages of the chat, oldest first.
        """
        async with self.session_factory() as session:
            q = await session.execute(
                select(Message)
                .where(Message.chat_id == chat_id)
                .order_by(Message.created_at)
            )
            return list(q.scalars().all())


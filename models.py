# models.py
import enum
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum, Text, Index
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()

DEFAULT_CHAT_TITLE = "New Chat"


def _new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class MessageRole(str, enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Chat(Base):
    __tablename__ = "chats"
    id = Column(String(32), primary_key=True, default=_new_id)
    user_id = Column(String(255), nullable=False)
    title = Column(String(255), nullable=False, default=DEFAULT_CHAT_TITLE)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    messages = relationship(
        "Message",
        back_populates="chat",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Message.created_at",
    )

    __table_args__ = (
        Index("chats_user_id_idx", "user_id"),
        Index("chats_updated_at_idx", "updated_at"),
    )


class Message(Base):
    __tablename__ = "messages"
    id = Column(String(32), primary_key=True, default=_new_id)
    chat_id = Column(String(32), ForeignKey("chats.id", ondelete="CASCADE"), nullable=False)
    role = Column(Enum(MessageRole, values_callable=lambda e: [m.value for m in e]), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    chat = relationship("Chat", back_populates="messages")

    __table_args__ = (
        Index("messages_chat_id_idx", "chat_id"),
        Index("messages_created_at_idx", "created_at"),
    )

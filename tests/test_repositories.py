from datetime import datetime

import pytest
from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError

from db import create_session_factory
from models import Chat, MessageRole


async def test_blank_title_falls_back_to_default(chat_repo):
    assert (await chat_repo.create_chat("alice")).title == "New Chat"
    assert (await chat_repo.create_chat("alice", "   ")).title == "New Chat"
    assert (await chat_repo.create_chat("alice", "Stats")).title == "Stats"


async def test_ids_are_unique_strings(chat_repo):
    a = await chat_repo.create_chat("alice")
    b = await chat_repo.create_chat("alice")
    assert isinstance(a.id, str)
    assert a.id != b.id


async def test_list_orders_by_last_update(engine, chat_repo):
    old = await chat_repo.create_chat("alice", "old")
    new = await chat_repo.create_chat("alice", "new")
    mid = await chat_repo.create_chat("alice", "mid")

    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        for chat, day in ((old, 1), (mid, 2), (new, 3)):
            await session.execute(update(Chat).where(Chat.id == chat.id).values(updated_at=datetime(2026, 1, day)))
        await session.commit()

    assert [c.title for c in await chat_repo.list_chats_for_user("alice")] == ["new", "mid", "old"]


async def test_get_chat_for_user_checks_owner(chat_repo):
    chat = await chat_repo.create_chat("alice")
    assert (await chat_repo.get_chat_for_user(chat.id, "alice")).id == chat.id
    assert await chat_repo.get_chat_for_user(chat.id, "bob") is None


async def test_delete_chat_reports_missing(chat_repo):
    assert await chat_repo.delete_chat("missing") is False


async def test_foreign_key_cascade(engine, chat_repo, message_repo):
    chat = await chat_repo.create_chat("alice")
    await message_repo.add_message(chat.id, MessageRole.USER, "hi")

    # bypass the repository: the schema alone removes the messages
    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        await session.execute(delete(Chat).where(Chat.id == chat.id))
        await session.commit()

    assert len(await message_repo.get_messages_for_chat(chat.id)) == 0


async def test_message_needs_existing_chat(message_repo):
    with pytest.raises(IntegrityError):
        await message_repo.add_message("missing", MessageRole.USER, "orphan")

import asyncio
from typing import List, Optional

import httpx
import pytest
import pytest_asyncio
from dependency_injector import providers
from langchain_core.language_models.fake_chat_models import GenericFakeChatModel
from langchain_core.messages import AIMessage, AIMessageChunk

from containers import container
from db import create_engine, create_session_factory, init_db
from main import app
from repositories.chat_repo import ChatRepository
from repositories.message_repo import MessageRepository
from services.chat_service import drain_reply_tasks

REPLY = "2 + 2 = 4. No calculator was harmed."


class StubLLM:
    """
    Streams fixed pieces, optionally failing before or in the middle of the
    stream. With a gate, pieces from `gate_at` on wait until the gate is set.
    """

    def __init__(
        self,
        pieces: List[str],
        error: Optional[Exception] = None,
        fail_at: int = 0,
        gate: Optional[asyncio.Event] = None,
        gate_at: int = 1,
    ):
        self.pieces = pieces
        self.error = error
        self.fail_at = fail_at
        self.gate = gate
        self.gate_at = gate_at
        self.calls = []
        self.produced = 0

    async def astream(self, messages):
        self.calls.append(messages)
        for i, piece in enumerate(self.pieces):
            if self.error is not None and i == self.fail_at:
                raise self.error
            if self.gate is not None and i == self.gate_at:
                await self.gate.wait()
            self.produced += 1
            yield AIMessageChunk(content=piece)
        if self.error is not None and self.fail_at >= len(self.pieces):
            raise self.error


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def chat_repo(engine):
    return ChatRepository(create_session_factory(engine))


@pytest.fixture
def message_repo(engine):
    return MessageRepository(create_session_factory(engine))


@pytest.fixture
def use_llm():
    def _use(llm):
        container.llm.override(providers.Object(llm))
        return llm
    return _use


@pytest.fixture
def stub_llm():
    return StubLLM


@pytest_asyncio.fixture
async def client(engine):
    container.engine.override(providers.Object(engine))
    container.session_factory.reset()
    container.llm.override(providers.Object(GenericFakeChatModel(messages=iter([AIMessage(content=REPLY)]))))

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await drain_reply_tasks()
    container.reset_override()
    container.session_factory.reset()


def as_user(user_id: str) -> dict:
    return {"X-User-Id": user_id}


@pytest.fixture
def alice():
    return as_user("alice")


@pytest.fixture
def bob():
    return as_user("bob")


@pytest.fixture
def reply():
    return REPLY

# containers.py
from dependency_injector import containers, providers
from langchain_ollama import ChatOllama

from config import get_settings
from db import create_engine, create_session_factory
from repositories.chat_repo import ChatRepository
from repositories.message_repo import MessageRepository
from services.chat_service import ChatService
from services.identity import IdentityProvider


class Container(containers.DeclarativeContainer):
    """
    Application dependency container.
    """

    settings = providers.Singleton(get_settings)

    # One engine (connection pool) and one session factory per process.
    # Repositories open a short-lived session per call.
    engine = providers.Singleton(create_engine, database_url=settings.provided.database_url)
    session_factory = providers.Singleton(create_session_factory, engine=engine)

    identity: providers.Singleton[IdentityProvider] = providers.Singleton(
        IdentityProvider,
        header_name=settings.provided.identity_header,
        cookie_name=settings.provided.identity_cookie,
    )

    chat_repo: providers.Factory[ChatRepository] = providers.Factory(
        ChatRepository,
        session_factory=session_factory,
    )

    message_repo: providers.Factory[MessageRepository] = providers.Factory(
        MessageRepository,
        session_factory=session_factory,
    )

    llm = providers.Singleton(
        ChatOllama,
        model=settings.provided.ollama_model,
        base_url=settings.provided.ollama_base_url,
        temperature=settings.provided.temperature,
        num_predict=settings.provided.max_tokens,
    )

    chat_service: providers.Factory[ChatService] = providers.Factory(
        ChatService,
        chat_repo=chat_repo,
        message_repo=message_repo,
        llm=llm,
    )

# The one container instance for the whole application
container = Container()

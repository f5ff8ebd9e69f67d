from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime

from models import MessageRole

# JSON field names are camelCase (chatId, createdAt, ...)
_CAMEL = {"alias_generator": to_camel, "populate_by_name": True}

# ======================
# Input DTOs
# ======================

class ChatCreateDTO(BaseModel):
    title: Optional[str] = Field(None, max_length=255)

    model_config = _CAMEL


class TurnDTO(BaseModel):
    role: MessageRole
    content: str


class ChatTurnRequestDTO(BaseModel):
    messages: List[TurnDTO] = Field(..., min_length=1)
    chat_id: Optional[str] = None

    model_config = _CAMEL

# ======================
# Output DTOs
# ======================

class MessageDTO(BaseModel):
    id: str
    role: MessageRole
    content: str
    created_at: datetime

    model_config = {"from_attributes": True, **_CAMEL}


class ChatDTO(BaseModel):
    id: str
    title: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True, **_CAMEL}


class DeleteResultDTO(BaseModel):
    success: bool = True


class ErrorDTO(BaseModel):
    error: str

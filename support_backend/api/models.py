"""
Pydantic models used for request/response validation and API data contracts.

Each class defines the structure of data expected in API endpoints, ensuring
validation and automatic OpenAPI schema generation. JSON field names are
camelCase (`sessionId`, `conversationId`) to match the chat frontend.
"""

from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from support_backend.api.utils import MAX_MESSAGE_LENGTH, MIN_MESSAGE_LENGTH, is_valid_session_id


class ChatMessageRequest(BaseModel):
    """
    Body of `POST /chat/message`.
    """
    message: str = Field(
        ...,
        min_length=MIN_MESSAGE_LENGTH,
        max_length=MAX_MESSAGE_LENGTH,
        description="User text. Length is checked before trimming.",
        examples=["What is your return policy?"],
    )
    """The message being sent."""
    sessionId: Optional[str] = Field(
        None,
        description="Session to continue (UUID-v4). A new session is started when omitted.",
        examples=["3f2b8c1e-9d4a-4e6b-8f0a-1c2d3e4f5a6b"],
    )
    """Session identifier chosen by the client, if any."""

    @field_validator("sessionId")
    @classmethod
    def check_session_id(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_valid_session_id(value):
            raise PydanticCustomError("invalid_session_id", "Invalid session ID format")
        return value


class ChatResponse(BaseModel):
    """
    Reply returned by `POST /chat/message`.
    """
    reply: str
    """Generated agent reply."""
    sessionId: str
    """Session the exchange was stored under."""


class MessageOut(BaseModel):
    """
    One stored turn as returned by the history endpoint.
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    conversation_id: str = Field(
        ...,
        validation_alias=AliasChoices("conversation_id", "conversationId"),
        serialization_alias="conversationId",
    )
    sender: Literal["user", "ai"]
    text: str
    timestamp: str


class ConversationHistory(BaseModel):
    """
    Full transcript of a session, oldest message first.
    """
    sessionId: str
    messages: List[MessageOut]


class NewConversationResponse(BaseModel):
    """
    Response of `POST /chat/new`.
    """
    sessionId: str
    message: str = "New conversation started"


class HealthServices(BaseModel):
    """Per-dependency health flags."""
    api: Literal["healthy", "unhealthy"]
    database: Literal["healthy", "unhealthy"]
    llm: Literal["healthy", "unhealthy"]


class HealthStatus(BaseModel):
    """
    Body of `GET /health`. `degraded` is served with HTTP 503.
    """
    status: Literal["healthy", "degraded"]
    timestamp: str
    services: HealthServices


class ErrorDetail(BaseModel):
    """One failed field of a request body."""
    field: str
    message: str


class ErrorResponse(BaseModel):
    """
    Shape of every error body.
    """
    error: str
    """Error title (e.g. 'AI Service Error', 'Validation Error')."""
    message: str
    """Human-readable explanation."""
    code: str
    """Stable machine-readable code."""
    details: Optional[List[ErrorDetail]] = None
    """Field errors, only for request validation failures."""

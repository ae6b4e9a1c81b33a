"""Chat-related Pydantic schemas."""

from pydantic import BaseModel, Field


class ChatTurnSchema(BaseModel):
    role: str = Field(..., description="user or assistant")
    content: str


class ChatRequestSchema(BaseModel):
    """Schema for POST /v1/chat request body."""

    message: str = Field(..., examples=["How do interest rates work?"])
    history: list[ChatTurnSchema] = Field(
        default_factory=list,
        description="Earlier turns, oldest first",
    )


class ChatResponseSchema(BaseModel):
    reply: str
    demo_mode: bool = Field(..., description="True when answered without the AI model")

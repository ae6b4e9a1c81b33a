"""Assistant chat endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.application.dto import ChatRequest
from src.application.services import ChatService
from src.core.dependencies import get_chat_service
from src.presentation.schemas import (
    ChatRequestSchema,
    ChatResponseSchema,
    ErrorResponseSchema,
)

chat_router = APIRouter(
    prefix="/chat",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
    },
)


@chat_router.post(
    "",
    response_model=ChatResponseSchema,
    summary="Chat With Assistant",
    description="""
    Ask the Vibe assistant about lending on the platform.

    Answers come from canned responses when no AI key is configured.
    """,
)
async def chat(
    request: ChatRequestSchema,
    chat_service: Annotated[ChatService, Depends(get_chat_service)],
) -> ChatResponseSchema:
    dto = ChatRequest(
        message=request.message,
        history=[turn.model_dump() for turn in request.history],
    )
    response = await chat_service.chat(dto)
    return ChatResponseSchema(reply=response.reply, demo_mode=response.demo_mode)

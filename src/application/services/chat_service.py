"""Chat service - the public AI assistant."""

import structlog

from src.application.dto import ChatRequest, ChatResponse
from src.domain.exceptions import InvalidRequestException
from src.service.ai import AIAssistant

logger = structlog.get_logger(__name__)


class ChatService:
    """Application service for assistant conversations."""

    def __init__(self, assistant: AIAssistant):
        self._assistant = assistant

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """
        Answer a user message in the context of recent history.

        Raises:
            InvalidRequestException: If the message or history is malformed
        """
        errors = request.validate()
        if errors:
            raise InvalidRequestException("; ".join(errors))

        reply = await self._assistant.chat(request.message, request.history)
        logger.info(
            "chat_answered",
            history_turns=len(request.history),
            demo_mode=not self._assistant.is_configured,
        )

        return ChatResponse(reply=reply, demo_mode=not self._assistant.is_configured)

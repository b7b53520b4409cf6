"""Conversation use cases."""

from convo.application.usecase.conversation.create_conversation import (
    CreateConversationRequest,
    CreateConversationResponse,
    CreateConversationUseCase,
)

__all__ = [
    "CreateConversationRequest",
    "CreateConversationResponse",
    "CreateConversationUseCase",
]

"""Domain services."""

from .base import Service
from .invite_builder import build_invite_payload, generate_invite_tag
from .invite_service import InviteService
from .join_flow import JoinFlowCoordinator
from .locks import ConversationLocks
from .messaging import KeyProvider, MessagingTransport

__all__ = [
    "ConversationLocks",
    "InviteService",
    "JoinFlowCoordinator",
    "KeyProvider",
    "MessagingTransport",
    "Service",
    "build_invite_payload",
    "generate_invite_tag",
]

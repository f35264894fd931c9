"""Generative capability module."""

from hela.llm.client import GenerativeCapability, OpenAICompatibleCapability
from hela.llm.models import CapabilityTier, GenerationResult, Message, Role

__all__ = [
    "CapabilityTier",
    "GenerationResult",
    "GenerativeCapability",
    "Message",
    "OpenAICompatibleCapability",
    "Role",
]

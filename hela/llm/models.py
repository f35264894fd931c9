"""Generative capability data models."""

from enum import Enum

from pydantic import BaseModel, Field


class CapabilityTier(str, Enum):
    """Where a generative capability runs."""

    ON_DEVICE = "on_device"
    REMOTE = "remote"


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"


class Message(BaseModel):
    """One chat message sent to a capability."""

    role: Role
    content: str

    def to_payload(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class GenerationResult(BaseModel):
    """Text returned by one generation call.

    Attributes:
        content: Raw response text, expected to hold a JSON record.
        model: Model that answered.
        tier: Tier the call ran on.
        finish_reason: Why generation stopped, when reported.
        prompt_tokens: Prompt token count.
        completion_tokens: Completion token count.
    """

    content: str = Field(description="Generated text")
    model: str = Field(description="Model used")
    tier: CapabilityTier = Field(description="Capability tier")
    finish_reason: str | None = Field(default=None, description="Stop reason")
    prompt_tokens: int = Field(default=0, description="Prompt token count")
    completion_tokens: int = Field(default=0, description="Completion token count")

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens

    @property
    def truncated(self) -> bool:
        """True when the token limit cut the response short."""
        return self.finish_reason == "length"

"""Classification pipeline orchestrator.

Runs the fallback chain on-device -> remote -> deterministic. A tier is
attempted only after the previous one failed; tiers never run concurrently
and are never retried. The deterministic tier always succeeds, so
``classify`` always returns a valid record unless the caller cancels it.
"""

import asyncio
import time

import httpx

from hela.classification.models import (
    MAX_TAGS,
    MIN_TAGS,
    ClassificationResult,
    ItemRecord,
    Tier,
    TierFailure,
)
from hela.classification.prompts import ClassificationPromptTemplate
from hela.classification.response_parser import parse_item_record
from hela.classification.synthesizer import synthesize
from hela.config import Settings
from hela.exceptions import (
    CapabilityUnavailableError,
    ErrorCode,
    GenerationFailedError,
    HelaError,
)
from hela.llm.client import GenerativeCapability, OpenAICompatibleCapability
from hela.llm.models import CapabilityTier
from hela.logging_config import get_logger
from hela.observability.metrics import track_classification, track_tier_failure
from hela.vision.models import VisionSummary

logger = get_logger(__name__)

TIER_ORDER: tuple[Tier, ...] = (Tier.ON_DEVICE, Tier.REMOTE, Tier.DETERMINISTIC)

_CAPABILITY_TIERS = {
    Tier.ON_DEVICE: CapabilityTier.ON_DEVICE,
    Tier.REMOTE: CapabilityTier.REMOTE,
}

DEFAULT_TIMEOUTS = {
    Tier.ON_DEVICE: 10.0,
    Tier.REMOTE: 45.0,
}


def next_tier(tier: Tier, succeeded: bool) -> Tier | None:
    """Transition function of the fallback chain.

    Args:
        tier: The tier just attempted.
        succeeded: Whether it produced a valid record.

    Returns:
        The next tier to attempt, or None when the chain is done.
    """
    if succeeded or tier is Tier.DETERMINISTIC:
        return None
    return TIER_ORDER[TIER_ORDER.index(tier) + 1]


class Classifier:
    """Turns a VisionSummary into a validated ItemRecord.

    Collaborators are injected so each tier can be made to fail
    independently.
    """

    def __init__(
        self,
        on_device: GenerativeCapability | None = None,
        remote: GenerativeCapability | None = None,
        prompt_template: ClassificationPromptTemplate | None = None,
        timeouts: dict[Tier, float] | None = None,
        min_tags: int = MIN_TAGS,
        max_tags: int = MAX_TAGS,
    ) -> None:
        """Initialize the classifier.

        Args:
            on_device: Capability for the first tier.
            remote: Capability for the second tier.
            prompt_template: Prompt template shared by both generative tiers.
            timeouts: Per-tier timeouts in seconds.
            min_tags: Smallest accepted tag count.
            max_tags: Largest accepted tag count.
        """
        self._capabilities: dict[Tier, GenerativeCapability | None] = {
            Tier.ON_DEVICE: on_device,
            Tier.REMOTE: remote,
        }
        self._prompt_template = prompt_template or ClassificationPromptTemplate(
            max_tags=max_tags
        )
        self._timeouts = {**DEFAULT_TIMEOUTS, **(timeouts or {})}
        self._min_tags = min_tags
        self._max_tags = max_tags

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
    ) -> "Classifier":
        """Compose a classifier with HTTP capabilities from settings."""
        return cls(
            on_device=OpenAICompatibleCapability.on_device(settings.on_device, client),
            remote=OpenAICompatibleCapability.remote(settings.remote, client),
            timeouts={
                Tier.ON_DEVICE: settings.on_device.timeout,
                Tier.REMOTE: settings.remote.timeout,
            },
            min_tags=settings.classifier.min_tags,
            max_tags=settings.classifier.max_tags,
        )

    def tier_status(self) -> dict[str, str]:
        """Availability of each generative tier."""
        return {
            tier.value: (
                "available"
                if capability is not None and capability.is_available()
                else "unavailable"
            )
            for tier, capability in self._capabilities.items()
        }

    async def close(self) -> None:
        """Release HTTP clients owned by the capabilities."""
        for capability in self._capabilities.values():
            if isinstance(capability, OpenAICompatibleCapability):
                await capability.close()

    async def classify(
        self,
        vision: VisionSummary,
        hint: str | None = None,
    ) -> ClassificationResult:
        """Classify a vision summary.

        Args:
            vision: Joined analyzer output.
            hint: Optional user hint about the item.

        Returns:
            ClassificationResult with the record and the producing tier.
        """
        start = time.perf_counter()
        system_prompt, user_prompt = self._prompt_template.build_prompt(vision, hint)
        failures: list[TierFailure] = []

        tier: Tier | None = TIER_ORDER[0]
        record: ItemRecord | None = None
        produced_by = Tier.DETERMINISTIC

        while tier is not None and tier is not Tier.DETERMINISTIC:
            try:
                record = await self._attempt(tier, system_prompt, user_prompt)
            except HelaError as e:
                failures.append(
                    TierFailure(tier=tier, code=e.code.value, message=e.message)
                )
                track_tier_failure(tier.value, e.code.value)
                logger.warning(
                    f"Classification tier {tier.value} failed: {e.message}",
                    extra={"tier": tier.value, "error_code": e.code.value},
                )
                tier = next_tier(tier, succeeded=False)
                continue

            produced_by = tier
            break

        if record is None:
            record = synthesize(vision)
            produced_by = Tier.DETERMINISTIC

        duration = time.perf_counter() - start
        track_classification(produced_by.value, duration)
        logger.info(
            "Classification completed",
            extra={
                "tier": produced_by.value,
                "category": record.category,
                "tag_count": len(record.tags),
                "skipped_tiers": len(failures),
            },
        )
        return ClassificationResult(record=record, tier=produced_by, failures=failures)

    async def _attempt(
        self,
        tier: Tier,
        system_prompt: str,
        user_prompt: str,
    ) -> ItemRecord:
        """Run one generative tier and validate its response.

        Raises:
            HelaError: Any tier failure, already classified by error code.
        """
        capability = self._capabilities.get(tier)
        if capability is None or not capability.is_available():
            raise CapabilityUnavailableError(
                f"No {tier.value} capability available",
                details={"tier": tier.value},
            )

        timeout = self._timeouts[tier]
        try:
            response = await asyncio.wait_for(
                capability.generate(
                    user_prompt,
                    _CAPABILITY_TIERS[tier],
                    system_prompt=system_prompt,
                ),
                timeout=timeout,
            )
        except TimeoutError as e:
            raise GenerationFailedError(
                f"{tier.value} generation exceeded {timeout}s",
                code=ErrorCode.GENERATION_TIMEOUT,
                details={"tier": tier.value, "timeout": timeout},
            ) from e
        except HelaError:
            raise
        except Exception as e:
            logger.exception(f"Unexpected {tier.value} capability error")
            raise GenerationFailedError(
                f"{tier.value} capability raised {type(e).__name__}: {e}",
                details={"tier": tier.value},
            ) from e

        if not isinstance(response, str):
            raise GenerationFailedError(
                f"{tier.value} capability returned {type(response).__name__}",
                code=ErrorCode.GENERATION_MALFORMED,
                details={"tier": tier.value},
            )

        return parse_item_record(
            response,
            min_tags=self._min_tags,
            max_tags=self._max_tags,
        )

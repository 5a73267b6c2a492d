"""
image_analyzer.py — the capture → analyze → normalize pipeline.

States of one run:
  Idle → Requesting → Success | Failed

run() never raises for provider problems: it returns a PipelineOutcome
holding either the result or the PipelineError. analyze() is the
UI-facing wrapper and hands every error to ONE fallback policy. The
default policy swaps in a fixed placeholder result, so a provider outage
is only visible in the logs. Set VISION_FALLBACK=raise to surface it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

import config
from providers.base import (
    KIND_OBJECT,
    KIND_TEXT,
    AnalysisResult,
    Annotation,
    EmptyCapture,
    PipelineError,
    VisionProvider,
)
from providers.normalizer import normalize
from providers.request_builder import build_request, strip_data_url
from summary import generate_summary

logger = logging.getLogger(__name__)

STATE_IDLE       = "idle"
STATE_REQUESTING = "requesting"
STATE_SUCCESS    = "success"
STATE_FAILED     = "failed"


# ── Explicit outcome ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PipelineOutcome:
    """Either a result or the error that prevented one, never both."""
    result: Optional[AnalysisResult] = None
    error: Optional[PipelineError]   = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def state(self) -> str:
        return STATE_SUCCESS if self.ok else STATE_FAILED


# ── Fallback policies ─────────────────────────────────────────────────────────

FallbackPolicy = Callable[[PipelineError, str], AnalysisResult]

FALLBACK_SUMMARY = "Placeholder analysis: Found 1 text element and 1 object"

FALLBACK_ANNOTATIONS: tuple[Annotation, ...] = (
    Annotation(id="fallback-text-1",   kind=KIND_TEXT,   content="Sample detected text", confidence=0.95),
    Annotation(id="fallback-object-1", kind=KIND_OBJECT, content="Mobile phone",         confidence=0.87),
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def degraded_result_policy(error: PipelineError, image: str) -> AnalysisResult:
    """Replace any failure with the fixed placeholder result."""
    return AnalysisResult(
        timestamp    = _now_iso(),
        source_image = image,
        annotations  = FALLBACK_ANNOTATIONS,
        summary      = FALLBACK_SUMMARY,
        degraded     = True,
    )


def raise_policy(error: PipelineError, image: str) -> AnalysisResult:
    """Surface the failure to the caller unchanged."""
    raise error


FALLBACK_POLICIES: dict[str, FallbackPolicy] = {
    "placeholder": degraded_result_policy,
    "raise":       raise_policy,
}


def policy_from_config() -> FallbackPolicy:
    policy = FALLBACK_POLICIES.get(config.VISION_FALLBACK)
    if policy is None:
        logger.warning(
            "Unknown VISION_FALLBACK=%r — using 'placeholder'", config.VISION_FALLBACK,
        )
        return degraded_result_policy
    return policy


# ── Pipeline ──────────────────────────────────────────────────────────────────

class AnalysisPipeline:
    """
    Holds only its collaborators; one instance can serve
    any number of concurrent analyze() calls.
    """

    def __init__(
        self,
        provider: VisionProvider,
        fallback_policy: FallbackPolicy = degraded_result_policy,
    ) -> None:
        self._provider = provider
        self._fallback = fallback_policy

    async def run(self, image: str) -> PipelineOutcome:
        """One request/normalise cycle. Provider failures come back in the outcome."""
        logger.debug("[%s] %s → %s", self._provider.name, STATE_IDLE, STATE_REQUESTING)
        request_body = build_request(image)

        try:
            data        = await self._provider.annotate(request_body)
            annotations = normalize(data)
        except PipelineError as exc:
            logger.debug("[%s] %s → %s", self._provider.name, STATE_REQUESTING, STATE_FAILED)
            return PipelineOutcome(error=exc)

        result = AnalysisResult(
            timestamp    = _now_iso(),
            source_image = image,
            annotations  = tuple(annotations),
            summary      = generate_summary(annotations),
        )
        logger.debug("[%s] %s → %s", self._provider.name, STATE_REQUESTING, STATE_SUCCESS)
        return PipelineOutcome(result=result)

    async def analyze(self, image: Optional[str]) -> AnalysisResult:
        """
        Analyse one base64 image (data-URL prefix allowed).

        Raises EmptyCapture when there is no image at all, the one failure
        the fallback can't paper over. Everything else goes through the
        fallback policy.
        """
        if not image or not strip_data_url(image).strip():
            raise EmptyCapture("No image data captured")

        outcome = await self.run(image)
        if outcome.ok:
            logger.info("Vision analysis OK — %s", outcome.result.summary)
            return outcome.result

        logger.error(
            "Vision analysis failed (%s): %s",
            type(outcome.error).__name__, outcome.error,
        )
        return self._fallback(outcome.error, image)


async def analyze_image(image: Optional[str]) -> AnalysisResult:
    """Convenience entry point: provider and fallback policy from config."""
    from providers.google_vision_provider import provider_from_config

    pipeline = AnalysisPipeline(provider_from_config(), policy_from_config())
    return await pipeline.analyze(image)

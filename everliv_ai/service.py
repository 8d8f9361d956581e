"""
Health analysis service.

Builds the prompt, calls DeepSeek once, and turns whatever comes back into a
schema-valid result:

    prompt built -> gateway called -> raw text -> parsed -> normalized
                         |                           |
                         +------ fallback <----------+

Expected failures (transport errors, empty completions, malformed output)
never escape as exceptions; each is logged with its failure kind and
replaced by the matching fallback. Nothing is retried.
"""
from typing import Optional

import httpx

from .config import DeepSeekConfig
from .deepseek_client import DeepSeekAPIError, DeepSeekClient, EmptyCompletionError
from .fallbacks import (
    biomarker_fallback,
    blood_analysis_fallback,
    health_recommendations_fallback,
    image_consultation_fallback,
)
from .models import (
    BiomarkerAnalysisRequest,
    BiomarkerRecommendations,
    EnhancedBloodAnalysisResults,
    HealthProfile,
    HealthRecommendations,
    MarkerSnapshot,
)
from .prompt_builder import (
    build_biomarker_messages,
    build_blood_panel_messages,
    build_health_recommendations_messages,
    build_image_consultation_messages,
)
from .prompts import IMAGE_CONSULTATION_DISCLAIMER
from .structured_logging import StructuredLogger
from .validation import (
    biomarker_recommendations_from_raw,
    blood_analysis_from_raw,
    health_recommendations_from_raw,
)

logger = StructuredLogger(__name__)

BIOMARKER_TEMPERATURE = 0.3
PANEL_TEMPERATURE = 0.2
BIOMARKER_MAX_TOKENS = 2000
PANEL_MAX_TOKENS = 2000
RECOMMENDATIONS_MAX_TOKENS = 3000
CONSULTATION_MAX_TOKENS = 1500


class HealthAnalysisService:
    """Entry points used by the HTTP layer. Every method always returns."""

    def __init__(self, client: DeepSeekClient):
        self.client = client

    @classmethod
    def from_config(
        cls,
        config: DeepSeekConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "HealthAnalysisService":
        return cls(DeepSeekClient(config, transport=transport))

    @property
    def config(self) -> DeepSeekConfig:
        return self.client.config

    async def _complete(self, analysis: str, messages: list[dict], **kwargs) -> Optional[str]:
        """Call the gateway; None means the caller should fall back."""
        try:
            return await self.client.complete(messages, **kwargs)
        except EmptyCompletionError as e:
            logger.warning(
                "DeepSeek returned no content, using fallback",
                failure_kind="empty_content",
                analysis=analysis,
                error=str(e),
            )
        except DeepSeekAPIError as e:
            logger.error(
                "DeepSeek call failed, using fallback",
                failure_kind="transport",
                analysis=analysis,
                status_code=e.status_code,
                error=str(e),
            )
        return None

    async def analyze_biomarker(
        self, request: BiomarkerAnalysisRequest
    ) -> BiomarkerRecommendations:
        """Recommendations for a single biomarker result."""
        logger.info(
            "Generating biomarker recommendations",
            biomarker=request.biomarker_name,
            status=request.status,
        )
        raw = await self._complete(
            "biomarker",
            build_biomarker_messages(request),
            temperature=BIOMARKER_TEMPERATURE,
            max_tokens=BIOMARKER_MAX_TOKENS,
        )
        if raw is None:
            return biomarker_fallback(request.biomarker_name, request.status)
        return biomarker_recommendations_from_raw(raw, request)

    async def analyze_blood_panel_text(self, text: str) -> EnhancedBloodAnalysisResults:
        """Interpret a typed-in or OCR'd blood panel."""
        logger.info("Analyzing blood panel text", chars=len(text))
        raw = await self._complete(
            "blood_panel",
            build_blood_panel_messages(text=text),
            temperature=PANEL_TEMPERATURE,
            max_tokens=PANEL_MAX_TOKENS,
        )
        if raw is None:
            return blood_analysis_fallback()
        return blood_analysis_from_raw(raw)

    async def analyze_blood_panel_image(
        self, image_base64: str, mime_type: Optional[str] = "image/jpeg"
    ) -> EnhancedBloodAnalysisResults:
        """Interpret a photo or scan of a blood panel."""
        logger.info("Analyzing blood panel image", mime_type=mime_type)
        raw = await self._complete(
            "blood_panel_image",
            build_blood_panel_messages(image_base64=image_base64, mime_type=mime_type),
            model=self.config.vision_model,
            temperature=PANEL_TEMPERATURE,
            max_tokens=PANEL_MAX_TOKENS,
        )
        if raw is None:
            return blood_analysis_fallback()
        return blood_analysis_from_raw(raw)

    async def generate_health_recommendations(
        self,
        profile: Optional[HealthProfile],
        markers: list[MarkerSnapshot],
    ) -> HealthRecommendations:
        logger.info(
            "Generating health recommendations",
            has_profile=profile is not None,
            markers=len(markers),
        )
        raw = await self._complete(
            "health_recommendations",
            build_health_recommendations_messages(profile, markers),
            temperature=BIOMARKER_TEMPERATURE,
            max_tokens=RECOMMENDATIONS_MAX_TOKENS,
        )
        if raw is None:
            return health_recommendations_fallback()
        return health_recommendations_from_raw(raw)

    async def consult_on_image(
        self,
        image_base64: str,
        mime_type: Optional[str] = "image/jpeg",
        question: Optional[str] = None,
    ) -> str:
        """Free-text dermatology consultation on a skin photo."""
        raw = await self._complete(
            "image_consultation",
            build_image_consultation_messages(image_base64, mime_type, question),
            model=self.config.vision_model,
            temperature=PANEL_TEMPERATURE,
            max_tokens=CONSULTATION_MAX_TOKENS,
            json_mode=False,
        )
        if raw is None:
            return image_consultation_fallback()
        return f"{raw.strip()}\n\n{IMAGE_CONSULTATION_DISCLAIMER}"

    async def close(self):
        await self.client.close()

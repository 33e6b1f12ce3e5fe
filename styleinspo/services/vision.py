"""Vision analysis for look images.

Providers are tried in order, one at a time:
- ``ReplicateVisionProvider`` runs DeepSeek-VL2 through the Replicate
  predictions API and returns prose, which the ``extract_*`` functions turn
  into fields.
- ``OpenAIVisionProvider`` asks a GPT-4o class model for structured output
  directly.

A provider that is not configured, fails, or returns unusable output is
skipped. When every provider is skipped the analyzer returns None and SEO
generation continues without vision data.
"""

import asyncio
import re
import time
from typing import List, Optional, Sequence

import httpx
from openai import AsyncOpenAI

from styleinspo.core.config import VisionSettings
from styleinspo.core.logging import get_logger
from styleinspo.models.domain.seo import StructuredVisionOutput, VisionAnalysisResult
from styleinspo.utils.url_helpers import is_http_url

logger = get_logger(__name__)

MIN_USABLE_OUTPUT = 10
MAX_ITEMS = 5
MAX_COLORS = 4

ANALYSIS_PROMPT = """Analyze this fashion outfit image and provide a detailed analysis. Focus on:
1. Clothing items visible (specific garments)
2. Colors and color palette
3. Style aesthetic (minimalist, bold, vintage, etc.)
4. Suggested occasion (professional, casual, formal, date-night, street-style)
5. Seasonal appropriateness (spring, summer, fall, winter)
6. Overall visual description

Provide your analysis in a structured format covering each point above."""

STRUCTURED_PROMPT = """Analyze this fashion outfit image and provide a basic analysis:
- detectedItems: list of clothing items seen
- colors: main colors in the outfit
- styleAesthetic: brief style description
- occasion: one of professional, casual, formal, date-night, street-style
- season: one of spring, summer, fall, winter
- visualDescription: detailed description of what you see in the image

Keep the response focused and brief."""

_ITEMS_PATTERN = re.compile(r'(?:clothing items?|garments?|pieces?)[^:]*:?\s*([^.]*)', re.IGNORECASE)
_COLORS_PATTERN = re.compile(r'colors?[^:]*:?\s*([^.]*)', re.IGNORECASE)
_STYLE_PATTERN = re.compile(r'(?:style|aesthetic)[^:]*:?\s*([^.]*)', re.IGNORECASE)
_LIST_SPLIT = re.compile(r'[,;]')

# Checked in order, first hit wins
OCCASION_KEYWORDS = (
    ('professional', ('professional', 'office', 'business')),
    ('formal', ('formal', 'evening', 'gala')),
    ('date-night', ('date', 'night out')),
    ('street-style', ('street', 'trendy', 'urban')),
)
SEASON_KEYWORDS = (
    ('winter', ('winter', 'cold')),
    ('summer', ('summer', 'hot')),
    ('spring', ('spring',)),
    ('fall', ('fall', 'autumn')),
)


def _split_list(match: Optional[re.Match], limit: int) -> List[str]:
    if not match:
        return []
    parts = (part.strip() for part in _LIST_SPLIT.split(match.group(1)))
    return [part for part in parts if part][:limit]


def extract_items(text: str) -> List[str]:
    """Up to five garments listed after an items/garments/pieces label."""
    return _split_list(_ITEMS_PATTERN.search(text.lower()), MAX_ITEMS)


def extract_colors(text: str) -> List[str]:
    return _split_list(_COLORS_PATTERN.search(text.lower()), MAX_COLORS)


def extract_style(text: str) -> str:
    match = _STYLE_PATTERN.search(text)
    return match.group(1).strip() if match else 'modern fashion'


def _first_keyword_hit(text: str, table, default: str) -> str:
    lower = text.lower()
    for value, keywords in table:
        if any(keyword in lower for keyword in keywords):
            return value
    return default


def extract_occasion(text: str) -> str:
    return _first_keyword_hit(text, OCCASION_KEYWORDS, 'casual')


def extract_season(text: str) -> str:
    return _first_keyword_hit(text, SEASON_KEYWORDS, 'current')


def parse_analysis_text(text: str, provider: Optional[str] = None) -> VisionAnalysisResult:
    """Turn free-text model output into structured fields."""
    return VisionAnalysisResult(
        detected_items=extract_items(text),
        colors=extract_colors(text),
        style_aesthetic=extract_style(text),
        occasion=extract_occasion(text),
        season=extract_season(text),
        visual_description=text,
        provider=provider
    )


class VisionProviderError(Exception):
    """A provider could not produce a usable analysis."""
    pass


class VisionProvider:
    """Common interface for vision backends."""

    name: str = "base"

    @property
    def configured(self) -> bool:
        return False

    async def analyze(self, image_url: str) -> VisionAnalysisResult:
        raise NotImplementedError


class ReplicateVisionProvider(VisionProvider):
    """DeepSeek-VL2 through the Replicate HTTP predictions API."""

    name = "replicate"
    base_url = "https://api.replicate.com/v1"
    poll_interval = 1.0

    def __init__(self, settings: VisionSettings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.settings.REPLICATE_API_TOKEN)

    async def analyze(self, image_url: str) -> VisionAnalysisResult:
        text = await self._run_prediction(image_url)
        if not text or len(text) < MIN_USABLE_OUTPUT:
            raise VisionProviderError("Empty or invalid response from DeepSeek VL2")
        return parse_analysis_text(text, provider=self.name)

    async def _run_prediction(self, image_url: str) -> str:
        headers = {
            "Authorization": f"Bearer {self.settings.REPLICATE_API_TOKEN}",
            "Content-Type": "application/json",
            "Prefer": "wait"
        }
        payload = {
            "version": self.settings.REPLICATE_MODEL_VERSION,
            "input": {
                "image": image_url,
                "prompt": ANALYSIS_PROMPT,
                "temperature": 0.3,
                "max_length_tokens": 1000
            }
        }
        timeout = self.settings.VISION_TIMEOUT_SECONDS
        deadline = time.monotonic() + timeout

        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=self._transport
        ) as client:
            response = await client.post("/predictions", json=payload)
            response.raise_for_status()
            prediction = response.json()

            # "Prefer: wait" may still hand back a prediction that is running
            while prediction.get("status") not in ("succeeded", "failed", "canceled"):
                if time.monotonic() > deadline:
                    raise VisionProviderError("Prediction timed out")
                await asyncio.sleep(self.poll_interval)
                poll_url = prediction.get("urls", {}).get("get") or f"/predictions/{prediction['id']}"
                response = await client.get(poll_url)
                response.raise_for_status()
                prediction = response.json()

        if prediction.get("status") != "succeeded":
            raise VisionProviderError(
                f"Prediction {prediction.get('status')}: {prediction.get('error')}"
            )

        output = prediction.get("output")
        if isinstance(output, list):
            return "".join(str(chunk) for chunk in output)
        return output if isinstance(output, str) else ""


class OpenAIVisionProvider(VisionProvider):
    """Structured-output vision analysis through the OpenAI API."""

    name = "openai"

    def __init__(self, settings: VisionSettings, client: Optional[AsyncOpenAI] = None):
        self.settings = settings
        self._client = client

    @property
    def configured(self) -> bool:
        return self._client is not None or bool(self.settings.OPENAI_API_KEY)

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.settings.OPENAI_API_KEY,
                timeout=self.settings.VISION_TIMEOUT_SECONDS
            )
        return self._client

    async def analyze(self, image_url: str) -> VisionAnalysisResult:
        response = await self.client.beta.chat.completions.parse(
            model=self.settings.OPENAI_VISION_MODEL,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": STRUCTURED_PROMPT},
                        {
                            "type": "image_url",
                            "image_url": {"url": image_url, "detail": "low"}
                        }
                    ]
                }
            ],
            response_format=StructuredVisionOutput,
            max_tokens=500,
            temperature=0.3
        )
        parsed = response.choices[0].message.parsed
        if parsed is None:
            raise VisionProviderError("Model returned no structured output")

        result = VisionAnalysisResult.model_validate(parsed.model_dump())
        result.provider = self.name
        return result


class VisionAnalyzer:
    """Try each configured provider in turn; the first usable result wins."""

    def __init__(self, providers: Sequence[VisionProvider]):
        self.providers = list(providers)

    @classmethod
    def from_settings(cls, settings: VisionSettings) -> "VisionAnalyzer":
        return cls([ReplicateVisionProvider(settings), OpenAIVisionProvider(settings)])

    @property
    def configured_providers(self) -> List[str]:
        return [provider.name for provider in self.providers if provider.configured]

    async def analyze(self, image_url: str) -> Optional[VisionAnalysisResult]:
        if not is_http_url(image_url):
            logger.warning("Skipping vision analysis for non-HTTP image reference")
            return None

        for provider in self.providers:
            if not provider.configured:
                logger.info("Vision provider not configured, skipping", provider=provider.name)
                continue
            try:
                result = await provider.analyze(image_url)
                logger.info(
                    "Vision analysis succeeded",
                    provider=provider.name,
                    items=len(result.detected_items)
                )
                return result
            except Exception as e:
                logger.warning(
                    "Vision provider failed, trying next",
                    provider=provider.name,
                    error=e
                )

        logger.info("No vision analysis available")
        return None

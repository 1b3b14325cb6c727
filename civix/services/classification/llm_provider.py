"""
LLM Classification Provider - external model integration.

Supports Google Gemini and OpenAI chat completions over HTTP.
Fails gracefully: any API error or unparseable answer comes back as an
error response so the classifier can fall back to keyword rules.
"""

from civix.core.settings import settings
from civix.services.classification.base import ClassificationProvider, ProviderResponse
from typing import Dict, Optional
import logging
import requests

logger = logging.getLogger(__name__)


GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
OPENAI_URL = "https://api.openai.com/v1/chat/completions"


class LLMClassificationProvider(ClassificationProvider):
    """
    External model provider.

    provider is "gemini" or "openai"; the matching API key must be set,
    otherwise the provider reports itself disabled.
    """

    MODEL_VERSION = "1.0"

    def __init__(
        self,
        provider: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        self.provider = (provider or settings.AI_PROVIDER).lower()
        if self.provider == "openai":
            self.api_key = api_key if api_key is not None else settings.OPENAI_API_KEY
            self.model = model or settings.OPENAI_MODEL
        else:
            self.provider = "gemini"
            self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
            self.model = model or settings.GEMINI_MODEL
        self.timeout_seconds = timeout_seconds or settings.AI_TIMEOUT_SECONDS
        self.session = session or requests.Session()
        self.enabled = bool(self.api_key and self.api_key.strip())

        if self.enabled:
            logger.info(f"LLM Classification Provider initialized: {self.provider}/{self.model}")
        else:
            logger.info(f"LLM Classification Provider disabled: no {self.provider} API key configured")

    def is_enabled(self) -> bool:
        return self.enabled

    def get_model_info(self) -> Dict[str, str]:
        return {"name": f"{self.provider}-{self.model}", "version": self.MODEL_VERSION}

    def get_timeout_seconds(self) -> float:
        return self.timeout_seconds

    def classify(self, title: str, description: str) -> ProviderResponse:
        model_info = self.get_model_info()
        if not self.enabled:
            return ProviderResponse(
                category=None,
                model_name=model_info["name"],
                model_version=self.MODEL_VERSION,
                error=f"{self.provider} API key not configured"
            )

        try:
            prompt = self._build_prompt(title, description)
            if self.provider == "openai":
                text = self._call_openai_api(prompt)
            else:
                text = self._call_gemini_api(prompt)

            return ProviderResponse(
                category=self._parse_category(text),
                model_name=model_info["name"],
                model_version=self.MODEL_VERSION
            )

        except Exception as e:
            logger.warning(f"LLM classification call failed: {e}")
            return ProviderResponse(
                category=None,
                model_name=model_info["name"],
                model_version=self.MODEL_VERSION,
                error=f"LLM API error: {e}"
            )

    def _build_prompt(self, title: str, description: str) -> str:
        return f"""Analyze the following civic issue and classify it into one of these categories: sanitation, electricity, water, or road.

Issue Title: {title}
Issue Description: {description}

Categories:
- sanitation: waste management, garbage collection, cleaning, public hygiene, sewage
- electricity: power outages, street lighting, electrical infrastructure, power lines
- water: water supply, plumbing, drainage, water quality, pipes, leaks
- road: road maintenance, potholes, traffic infrastructure, pavement, road safety

Return only one word from the categories above that best matches this issue. If none match well, return "unknown"."""

    def _call_gemini_api(self, prompt: str) -> str:
        response = self.session.post(
            GEMINI_URL.format(model=self.model),
            params={"key": self.api_key},
            json={"contents": [{"parts": [{"text": prompt}]}]},
            timeout=self.timeout_seconds
        )
        if response.status_code != 200:
            raise RuntimeError(f"Gemini API returned status {response.status_code}: {response.text[:200]}")

        data = response.json()
        return data.get("candidates", [{}])[0].get("content", {}).get("parts", [{}])[0].get("text", "")

    def _call_openai_api(self, prompt: str) -> str:
        response = self.session.post(
            OPENAI_URL,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json"
            },
            json={
                "model": self.model,
                "messages": [
                    {"role": "system", "content": "You classify municipal service requests. Answer with one word."},
                    {"role": "user", "content": prompt}
                ],
                "temperature": 0,
                "max_tokens": 5
            },
            timeout=self.timeout_seconds
        )
        if response.status_code != 200:
            raise RuntimeError(f"OpenAI API returned status {response.status_code}: {response.text[:200]}")

        data = response.json()
        return data.get("choices", [{}])[0].get("message", {}).get("content", "")

    @staticmethod
    def _parse_category(text: str) -> str:
        """First word of the answer, lowercased, without quotes or punctuation."""
        words = (text or "").strip().lower().split()
        if not words:
            return ""
        return words[0].strip("\"'`.,:;!*")

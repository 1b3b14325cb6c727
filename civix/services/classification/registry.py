"""
Classifier Registry.

Builds the CategoryClassifier from configuration: keyword rules always,
plus the configured external model (wrapped in the timeout guard) when AI
is enabled and an API key is available.
"""

from typing import Optional
import logging

from civix.core.settings import settings
from civix.services.classification.base import ClassificationProvider
from civix.services.classification.classifier import CategoryClassifier
from civix.services.classification.guarded_provider import GuardedClassificationProvider
from civix.services.classification.llm_provider import LLMClassificationProvider

logger = logging.getLogger(__name__)


def build_external_provider() -> Optional[ClassificationProvider]:
    if not settings.AI_ENABLED:
        logger.info("AI is disabled globally (AI_ENABLED=false), using keyword classification only")
        return None

    provider = LLMClassificationProvider()
    if not provider.is_enabled():
        return None

    logger.info(f"External classifier registered: {provider.get_model_info()['name']}")
    return GuardedClassificationProvider(provider, timeout_seconds=settings.AI_TIMEOUT_SECONDS)


# Global classifier instance (singleton)
_classifier: Optional[CategoryClassifier] = None


def get_category_classifier() -> CategoryClassifier:
    """
    Get or create the CategoryClassifier singleton.

    Returns:
        CategoryClassifier: configured from settings
    """
    global _classifier
    if _classifier is None:
        _classifier = CategoryClassifier(external_provider=build_external_provider())
    return _classifier

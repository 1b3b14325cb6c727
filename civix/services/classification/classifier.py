"""
Category Classifier.

Maps a reported issue to a service category:

1. Reporter picked a concrete category -> pass-through (direct, 1.0).
2. External model configured and answers with a valid category
   -> external-model, fixed EXTERNAL_MODEL_CONFIDENCE.
3. Otherwise keyword rules -> keyword-fallback, fixed
   KEYWORD_CLASSIFICATION_CONFIDENCE, or "unknown" with 0.0.

Never raises: every failure path degrades to keyword rules or "unknown".
"""

from typing import Optional
import logging

from civix.core.settings import settings
from civix.models.assignment import ClassificationMethod, ClassificationResult
from civix.models.issue import IssueCategory
from civix.services.classification.base import ClassificationProvider
from civix.services.classification.keyword_provider import KeywordClassificationProvider

logger = logging.getLogger(__name__)


class CategoryClassifier:

    def __init__(
        self,
        external_provider: Optional[ClassificationProvider] = None,
        keyword_provider: Optional[ClassificationProvider] = None,
        keyword_confidence: Optional[float] = None,
        external_confidence: Optional[float] = None
    ):
        self.external_provider = external_provider
        self.keyword_provider = keyword_provider or KeywordClassificationProvider()
        self.keyword_confidence = (
            keyword_confidence if keyword_confidence is not None
            else settings.KEYWORD_CLASSIFICATION_CONFIDENCE
        )
        self.external_confidence = (
            external_confidence if external_confidence is not None
            else settings.EXTERNAL_MODEL_CONFIDENCE
        )

    def classify(
        self,
        title: str,
        description: str,
        category: Optional[IssueCategory] = None
    ) -> ClassificationResult:
        if category is not None and category not in (IssueCategory.OTHER, IssueCategory.UNKNOWN):
            return ClassificationResult(
                category=category,
                confidence=1.0,
                method=ClassificationMethod.DIRECT
            )

        external = self._classify_external(title, description)
        if external is not None:
            return external

        return self._classify_keywords(title, description)

    def _classify_external(self, title: str, description: str) -> Optional[ClassificationResult]:
        provider = self.external_provider
        if provider is None or not provider.is_enabled():
            return None

        try:
            response = provider.classify(title, description)
        except Exception as e:
            logger.warning(f"External classification raised, falling back to keywords: {e}")
            return None

        if response.error:
            logger.warning(f"External classification unavailable ({response.error}), falling back to keywords")
            return None

        try:
            category = IssueCategory(response.category)
        except ValueError:
            logger.warning(f"External classification returned {response.category!r}, falling back to keywords")
            return None

        if category in (IssueCategory.OTHER, IssueCategory.UNKNOWN):
            logger.info("External model could not decide, falling back to keywords")
            return None

        logger.info(f"Issue classified as '{category.value}' by {response.model_name}")
        return ClassificationResult(
            category=category,
            confidence=self.external_confidence,
            method=ClassificationMethod.EXTERNAL_MODEL
        )

    def _classify_keywords(self, title: str, description: str) -> ClassificationResult:
        response = self.keyword_provider.classify(title, description)
        try:
            category = IssueCategory(response.category)
        except ValueError:
            category = IssueCategory.UNKNOWN

        if response.error or category == IssueCategory.UNKNOWN:
            return ClassificationResult(
                category=IssueCategory.UNKNOWN,
                confidence=0.0,
                method=ClassificationMethod.KEYWORD_FALLBACK
            )

        logger.info(f"Issue classified as '{category.value}' by keyword rules (score {response.score})")
        return ClassificationResult(
            category=category,
            confidence=self.keyword_confidence,
            method=ClassificationMethod.KEYWORD_FALLBACK
        )

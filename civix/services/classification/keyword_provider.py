"""
Keyword Classification Provider - rule-based fallback.

Deterministic, fast, always available. Used directly when no external model
is configured, and as the fallback whenever the external model fails.
"""

from civix.models.issue import IssueCategory, SERVICE_CATEGORIES
from civix.services.classification.base import ClassificationProvider, ProviderResponse
from typing import Dict, List
import logging

logger = logging.getLogger(__name__)


# Keyword sets per category. Matching is substring-based on lowercased text,
# so "plumb" covers plumber/plumbing and "light" covers streetlight.
CATEGORY_KEYWORDS: Dict[IssueCategory, List[str]] = {
    IssueCategory.SANITATION: [
        "waste", "garbage", "trash", "cleaning", "sewage",
        "toilet", "hygiene", "dirty", "litter", "dump",
    ],
    IssueCategory.ELECTRICITY: [
        "power", "electric", "light", "outage", "blackout",
        "voltage", "wire", "pole", "transformer",
    ],
    IssueCategory.WATER: [
        "water", "pipe", "leak", "drain", "plumb",
        "tap", "supply", "pressure", "overflow", "flooding",
    ],
    IssueCategory.ROAD: [
        "road", "street", "pothole", "pavement", "traffic",
        "signal", "crossing", "path", "sidewalk", "asphalt",
    ],
}


def normalize_text(title: str, description: str) -> str:
    return f"{title or ''} {description or ''}".lower()


def score_categories(text: str) -> Dict[IssueCategory, int]:
    """Number of distinct keywords of each category found in text."""
    return {
        category: sum(1 for keyword in CATEGORY_KEYWORDS[category] if keyword in text)
        for category in SERVICE_CATEGORIES
    }


def pick_category(scores: Dict[IssueCategory, int]) -> IssueCategory:
    """
    Strictly highest score wins. Ties go to the earlier category in
    SERVICE_CATEGORIES (sanitation > electricity > water > road).
    A best score of zero yields UNKNOWN.
    """
    best_category = IssueCategory.UNKNOWN
    best_score = 0
    for category in SERVICE_CATEGORIES:
        if scores.get(category, 0) > best_score:
            best_score = scores[category]
            best_category = category
    return best_category


class KeywordClassificationProvider(ClassificationProvider):

    MODEL_NAME = "keyword-rules-v1"
    MODEL_VERSION = "1.0.0"
    TIMEOUT_SECONDS = 0.1  # No network call

    def is_enabled(self) -> bool:
        return True

    def get_model_info(self) -> Dict[str, str]:
        return {"name": self.MODEL_NAME, "version": self.MODEL_VERSION}

    def get_timeout_seconds(self) -> float:
        return self.TIMEOUT_SECONDS

    def classify(self, title: str, description: str) -> ProviderResponse:
        try:
            scores = score_categories(normalize_text(title, description))
            category = pick_category(scores)
            readable = ", ".join(f"{c.value}={s}" for c, s in scores.items())
            logger.debug(f"Keyword scores: {readable} -> {category.value}")
            return ProviderResponse(
                category=category.value,
                model_name=self.MODEL_NAME,
                model_version=self.MODEL_VERSION,
                score=scores.get(category, 0),
            )
        except Exception as e:
            logger.error(f"Keyword classification error: {e}")
            return ProviderResponse(
                category=IssueCategory.UNKNOWN.value,
                model_name=self.MODEL_NAME,
                model_version=self.MODEL_VERSION,
                score=0,
                error=str(e),
            )

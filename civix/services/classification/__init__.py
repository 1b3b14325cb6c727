"""
Issue classification - keyword rules with an optional external model.

The external model is advisory: its answers are validated, time-bounded,
and never auto-assign an issue on their own.
"""

from civix.services.classification.base import ClassificationProvider, ProviderResponse
from civix.services.classification.classifier import CategoryClassifier
from civix.services.classification.guarded_provider import GuardedClassificationProvider
from civix.services.classification.keyword_provider import KeywordClassificationProvider
from civix.services.classification.llm_provider import LLMClassificationProvider
from civix.services.classification.registry import get_category_classifier

__all__ = [
    "CategoryClassifier",
    "ClassificationProvider",
    "GuardedClassificationProvider",
    "KeywordClassificationProvider",
    "LLMClassificationProvider",
    "ProviderResponse",
    "get_category_classifier",
]

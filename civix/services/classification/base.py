"""
Classification Provider Base Interface.

Defines the contract for category classification providers.
All providers (keyword rules, external LLMs) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)


class ProviderResponse:
    """
    Standardized provider response.

    category is the provider's raw answer (lowercase text); it is validated
    against the category enum by the caller, not here.
    """

    def __init__(
        self,
        category: Optional[str],
        model_name: str,
        model_version: str,
        score: Optional[int] = None,
        error: Optional[str] = None
    ):
        self.category = category
        self.model_name = model_name
        self.model_version = model_version
        self.score = score  # Keyword hit count (keyword provider only)
        self.error = error  # If the provider failed, error message stored here


class ClassificationProvider(ABC):
    """
    Abstract base class for classification providers.

    classify MUST:
    - Return a ProviderResponse even on failure
    - Never raise (catch and return the error in the response)
    """

    @abstractmethod
    def is_enabled(self) -> bool:
        """True if the provider is configured and ready."""

    @abstractmethod
    def get_model_info(self) -> Dict[str, str]:
        """Dict with 'name' and 'version' keys."""

    @abstractmethod
    def get_timeout_seconds(self) -> float:
        """Upper bound for one classify call, in seconds."""

    @abstractmethod
    def classify(self, title: str, description: str) -> ProviderResponse:
        """
        Classify an issue from its title and description.

        Args:
            title: Issue title (may be empty)
            description: Free-text description

        Returns:
            ProviderResponse (may contain error)
        """

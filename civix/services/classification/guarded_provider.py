"""
Timeout + validation wrapper for external classification providers.

The wrapped provider runs on a worker thread; if it does not answer within
its deadline the call is abandoned and reported as an error. The answer is
also checked against the service-category enum. Either way the wrapper
never raises and never blocks longer than the deadline.
"""

from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from typing import Dict, Optional
import logging

from civix.models.issue import SERVICE_CATEGORIES
from civix.services.classification.base import ClassificationProvider, ProviderResponse

logger = logging.getLogger(__name__)

VALID_CATEGORIES = {category.value for category in SERVICE_CATEGORIES}

# Shared by every guarded provider; abandoned calls finish in the background.
_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="classifier")


class GuardedClassificationProvider(ClassificationProvider):

    def __init__(self, inner: ClassificationProvider, timeout_seconds: Optional[float] = None):
        self.inner = inner
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else inner.get_timeout_seconds()

    def is_enabled(self) -> bool:
        return self.inner.is_enabled()

    def get_model_info(self) -> Dict[str, str]:
        return self.inner.get_model_info()

    def get_timeout_seconds(self) -> float:
        return self.timeout_seconds

    def classify(self, title: str, description: str) -> ProviderResponse:
        info = self.get_model_info()
        try:
            future = _executor.submit(self.inner.classify, title, description)
            response = future.result(timeout=self.timeout_seconds)
        except FuturesTimeoutError:
            future.cancel()
            logger.warning(f"Provider {info['name']} timed out after {self.timeout_seconds}s")
            return self._error(info, f"timed out after {self.timeout_seconds}s")
        except Exception as e:
            logger.warning(f"Provider {info['name']} raised: {e}")
            return self._error(info, f"provider raised: {e}")

        if response.error:
            return response

        if response.category not in VALID_CATEGORIES:
            logger.warning(f"Provider {info['name']} returned invalid category: {response.category!r}")
            return self._error(info, f"invalid category: {response.category!r}")

        return response

    @staticmethod
    def _error(info: Dict[str, str], message: str) -> ProviderResponse:
        return ProviderResponse(
            category=None,
            model_name=info["name"],
            model_version=info["version"],
            error=message
        )

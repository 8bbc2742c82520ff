"""Hugging Face Inference API client implementing the summarize/similarity capabilities."""

from numbers import Real
from typing import Any, Dict, Optional

import requests

from .config import Settings
from .errors import ProviderError
from .logger import get_logger
from .retry import CircuitBreaker, RetryError, exponential_backoff, should_retry_http_status

logger = get_logger()


class _RetryableStatus(Exception):
    """HTTP status worth retrying (rate limit, model loading, 5xx)."""

    def __init__(self, response):
        super().__init__(f"HTTP {response.status_code}")
        self.response = response


class HuggingFaceClient:
    """
    Summarization and sentence-similarity over the hosted inference API.

    Transient failures (timeouts, connection errors, 408/429/5xx) are retried
    with exponential backoff; repeated failures open a circuit breaker. Every
    failure that leaves this class is a ProviderError.
    """

    SUMMARIZE = "summarize"
    SIMILARITY = "similarity"

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()
        self.breaker = CircuitBreaker(
            failure_threshold=settings.circuit_failure_threshold,
            recovery_timeout=settings.circuit_recovery_timeout,
            expected_exception=ProviderError,
            name="huggingface",
        )
        self._post_with_retry = exponential_backoff(
            max_retries=settings.max_retries,
            base_delay=settings.retry_base_delay,
            exceptions=(requests.exceptions.Timeout, requests.exceptions.ConnectionError, _RetryableStatus),
            on_retry=self._log_retry,
        )(self._post)

    def _model_url(self, model: str) -> str:
        return f"{self.settings.api_base}/{model}"

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.settings.api_key}"}

    def _post(self, url: str, payload: Dict[str, Any]):
        resp = self.session.post(url, json=payload, headers=self._headers(), timeout=self.settings.timeout)
        if should_retry_http_status(resp.status_code):
            raise _RetryableStatus(resp)
        return resp

    @staticmethod
    def _log_retry(attempt: int, exc: Exception, delay: float):
        logger.warning("Retrying provider request", attempt=attempt, error=str(exc), delay=delay)

    def _request(self, capability: str, model: str, payload: Dict[str, Any]) -> Any:
        if not self.settings.api_key:
            raise ProviderError("HF_API_KEY is not set", capability=capability)
        return self.breaker.call(self._send, capability, self._model_url(model), payload)

    def _send(self, capability: str, url: str, payload: Dict[str, Any]) -> Any:
        """Send one logical request (with retries) and decode its JSON body."""
        logger.record_provider_attempt(capability)
        try:
            resp = self._post_with_retry(url, payload)
            resp.raise_for_status()
            data = resp.json()
        except RetryError as e:
            cause = e.__cause__
            status = cause.response.status_code if isinstance(cause, _RetryableStatus) else None
            logger.record_provider_failure(capability, type(cause).__name__ if cause else "RetryError")
            logger.error("Provider request failed after retries", capability=capability, url=url, status=status)
            raise ProviderError(f"{capability} request failed after retries: {cause}", capability=capability, status=status) from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.record_provider_failure(capability, f"HTTPError_{status}")
            logger.error("Provider request rejected", capability=capability, url=url, status=status)
            raise ProviderError(f"{capability} request failed ({status})", capability=capability, status=status) from e
        except ValueError as e:
            logger.record_provider_failure(capability, "InvalidJSON")
            raise ProviderError(f"{capability} returned invalid JSON", capability=capability) from e
        except requests.exceptions.RequestException as e:
            logger.record_provider_failure(capability, "RequestException")
            logger.error("Provider request error", capability=capability, url=url, error=str(e))
            raise ProviderError(f"{capability} request error: {e}", capability=capability) from e

        logger.record_provider_success(capability)
        return data

    def summarize(self, text: str) -> str:
        """Condense `text` with the configured summarization model."""
        payload = {
            "inputs": text,
            "parameters": {
                "max_new_tokens": self.settings.max_new_tokens,
                "temperature": self.settings.temperature,
            },
        }
        data = self._request(self.SUMMARIZE, self.settings.summarizer_model, payload)
        try:
            summary = data[0]["summary_text"]
        except (LookupError, TypeError):
            raise ProviderError(f"Unexpected summarization payload: {data!r:.200}", capability=self.SUMMARIZE)
        if not isinstance(summary, str):
            raise ProviderError("Summarization returned a non-string summary", capability=self.SUMMARIZE)
        return summary

    def similarity(self, source: str, target: str) -> float:
        """Score `target` against `source`; one scalar in [0, 1]."""
        payload = {"inputs": {"source_sentence": source, "sentences": [target]}}
        data = self._request(self.SIMILARITY, self.settings.similarity_model, payload)
        if not isinstance(data, list) or len(data) != 1:
            raise ProviderError(f"Expected one similarity score, got {data!r:.200}", capability=self.SIMILARITY)
        value = data[0]
        if isinstance(value, bool) or not isinstance(value, Real):
            raise ProviderError(f"Similarity score is not a number: {value!r}", capability=self.SIMILARITY)
        if not 0.0 <= value <= 1.0:
            raise ProviderError(f"Similarity score {value} outside [0, 1]", capability=self.SIMILARITY)
        return float(value)

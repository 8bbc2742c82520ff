"""
Tests for the Hugging Face inference client.
"""

import json
from unittest.mock import MagicMock

import pytest
import requests

from matchscore.config import Settings
from matchscore.errors import CircuitOpenError, ProviderError
from matchscore.providers import HuggingFaceClient


def _response(status: int, payload=None, raw: bytes = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.url = "https://api.example.test/model"
    resp._content = raw if raw is not None else json.dumps(payload).encode("utf-8")
    return resp


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_key="test-key",
        api_base="https://api.example.test/models",
        max_retries=2,
        retry_base_delay=0.0,
        circuit_failure_threshold=5,
    )


@pytest.fixture
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


class TestSummarize:
    """Test the summarization capability."""

    def test_returns_summary_text(self, settings, session):
        session.post.return_value = _response(200, [{"summary_text": "Short summary."}])
        client = HuggingFaceClient(settings, session=session)

        assert client.summarize("A long resume text") == "Short summary."

    def test_request_shape(self, settings, session):
        session.post.return_value = _response(200, [{"summary_text": "s"}])
        client = HuggingFaceClient(settings, session=session)

        client.summarize("A long resume text")

        args, kwargs = session.post.call_args
        assert args[0] == "https://api.example.test/models/facebook/bart-large-cnn"
        assert kwargs["json"] == {
            "inputs": "A long resume text",
            "parameters": {"max_new_tokens": 1024, "temperature": 0.2},
        }
        assert kwargs["headers"] == {"Authorization": "Bearer test-key"}
        assert kwargs["timeout"] == 30.0

    def test_malformed_payload(self, settings, session):
        session.post.return_value = _response(200, {"error": "unexpected"})
        client = HuggingFaceClient(settings, session=session)

        with pytest.raises(ProviderError) as excinfo:
            client.summarize("text")
        assert excinfo.value.capability == "summarize"


class TestSimilarity:
    """Test the sentence-similarity capability."""

    def test_returns_single_score(self, settings, session):
        session.post.return_value = _response(200, [0.85])
        client = HuggingFaceClient(settings, session=session)

        assert client.similarity("source", "target") == 0.85

        args, kwargs = session.post.call_args
        assert args[0].endswith("/sentence-transformers/all-MiniLM-L6-v2")
        assert kwargs["json"] == {"inputs": {"source_sentence": "source", "sentences": ["target"]}}

    @pytest.mark.parametrize("payload", [[1.5], [-0.2], ["high"], [0.1, 0.2], {"score": 0.5}, [True]])
    def test_invalid_scores_rejected(self, settings, session, payload):
        session.post.return_value = _response(200, payload)
        client = HuggingFaceClient(settings, session=session)

        with pytest.raises(ProviderError) as excinfo:
            client.similarity("source", "target")
        assert excinfo.value.capability == "similarity"


class TestErrorHandling:
    """Test retry, error mapping and circuit breaking at the boundary."""

    def test_missing_api_key(self, session):
        client = HuggingFaceClient(Settings(api_key=None), session=session)

        with pytest.raises(ProviderError, match="HF_API_KEY"):
            client.summarize("text")
        session.post.assert_not_called()

    def test_client_error_not_retried(self, settings, session):
        session.post.return_value = _response(401, {"error": "unauthorized"})
        client = HuggingFaceClient(settings, session=session)

        with pytest.raises(ProviderError) as excinfo:
            client.summarize("text")

        assert excinfo.value.status == 401
        assert session.post.call_count == 1

    def test_model_loading_retried_then_succeeds(self, settings, session):
        session.post.side_effect = [
            _response(503, {"error": "Model is currently loading"}),
            _response(200, [0.5]),
        ]
        client = HuggingFaceClient(settings, session=session)

        assert client.similarity("a", "b") == 0.5
        assert session.post.call_count == 2

    def test_retries_exhausted(self, settings, session):
        session.post.return_value = _response(503, {"error": "overloaded"})
        client = HuggingFaceClient(settings, session=session)

        with pytest.raises(ProviderError) as excinfo:
            client.similarity("a", "b")

        assert excinfo.value.status == 503
        assert session.post.call_count == 3  # Initial + 2 retries

    def test_timeout_becomes_provider_error(self, settings, session):
        session.post.side_effect = requests.exceptions.Timeout("read timed out")
        client = HuggingFaceClient(settings, session=session)

        with pytest.raises(ProviderError):
            client.summarize("text")
        assert session.post.call_count == 3

    def test_invalid_json(self, settings, session):
        session.post.return_value = _response(200, raw=b"<html>gateway</html>")
        client = HuggingFaceClient(settings, session=session)

        with pytest.raises(ProviderError):
            client.summarize("text")

    def test_circuit_opens_after_repeated_failures(self, session):
        settings = Settings(api_key="k", max_retries=0, retry_base_delay=0.0, circuit_failure_threshold=2)
        session.post.return_value = _response(500, {"error": "boom"})
        client = HuggingFaceClient(settings, session=session)

        for _ in range(2):
            with pytest.raises(ProviderError):
                client.summarize("text")

        with pytest.raises(CircuitOpenError):
            client.summarize("text")
        assert session.post.call_count == 2

"""Unit tests for EmbeddingModel class."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from unittest.mock import Mock, patch, MagicMock
import httpx
from services.embedding_model import EmbeddingModel, create_embedding_model


def http_client(*responses):
    """Patched httpx.Client returning `responses` in order from post()."""
    mock_client = MagicMock()
    if len(responses) == 1 and not isinstance(responses[0], Exception):
        mock_client.__enter__.return_value.post.return_value = responses[0]
    else:
        mock_client.__enter__.return_value.post.side_effect = list(responses)
    return mock_client


def response(status_code=200, payload=None, text=""):
    mock_response = Mock()
    mock_response.status_code = status_code
    mock_response.json.return_value = payload
    mock_response.text = text
    return mock_response


class TestEmbeddingModel:
    """Test suite for EmbeddingModel."""

    def test_initialization_success(self):
        model = EmbeddingModel(api_key="test_key")
        assert model.api_key == "test_key"
        assert model.model_name == "sentence-transformers/all-MiniLM-L6-v2"
        assert model.api_url.endswith("/pipeline/feature-extraction/sentence-transformers/all-MiniLM-L6-v2")
        assert model.max_retries == 5

    def test_initialization_without_api_key(self):
        with pytest.raises(ValueError, match="HUGGINGFACE_API_KEY"):
            EmbeddingModel(api_key=None)

    def test_factory_without_key_disables_index(self):
        assert create_embedding_model(api_key=None) is None
        assert create_embedding_model(api_key="") is None

    def test_factory_with_key(self):
        model = create_embedding_model(api_key="test_key")
        assert isinstance(model, EmbeddingModel)

    def test_embed_text_empty_string(self):
        model = EmbeddingModel(api_key="test_key")

        with pytest.raises(ValueError, match="Text cannot be empty"):
            model.embed_text("")

        with pytest.raises(ValueError, match="Text cannot be empty"):
            model.embed_text("   ")

    @patch('httpx.Client')
    def test_embed_text_success(self, mock_client_class):
        mock_client_class.return_value = http_client(response(payload=[[0.1, 0.2, 0.3]]))

        model = EmbeddingModel(api_key="test_key")
        result = model.embed_text("test text")

        assert result == [0.1, 0.2, 0.3]

        post = mock_client_class.return_value.__enter__.return_value.post
        assert post.call_args.kwargs["json"]["inputs"] == ["test text"]
        assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer test_key"

    @patch('httpx.Client')
    @patch('time.sleep')
    def test_retry_on_503_success(self, mock_sleep, mock_client_class):
        mock_client_class.return_value = http_client(
            response(status_code=503, text='{"estimated_time": 10}'),
            response(payload=[[0.1, 0.2, 0.3]])
        )

        model = EmbeddingModel(api_key="test_key", initial_delay=1.0)
        result = model.embed_text("test text")

        assert result == [0.1, 0.2, 0.3]
        mock_sleep.assert_called_once_with(1.0)

    @patch('httpx.Client')
    def test_backoff_doubles_until_exhausted(self, mock_client_class):
        mock_client_class.return_value = http_client(response(status_code=503))

        model = EmbeddingModel(api_key="test_key", max_retries=3, initial_delay=2.0)

        with patch('time.sleep') as mock_sleep:
            with pytest.raises(RuntimeError, match="Failed to generate embeddings"):
                model.embed_text("test text")

        assert [c.args[0] for c in mock_sleep.call_args_list] == [2.0, 4.0]

    @patch('httpx.Client')
    def test_backoff_is_capped(self, mock_client_class):
        mock_client_class.return_value = http_client(response(status_code=503))

        model = EmbeddingModel(api_key="test_key", max_retries=4, initial_delay=40.0)

        with patch('time.sleep') as mock_sleep:
            with pytest.raises(RuntimeError):
                model.embed_text("test text")

        assert [c.args[0] for c in mock_sleep.call_args_list] == [40.0, 60.0, 60.0]

    @patch('httpx.Client')
    def test_rate_limit_error(self, mock_client_class):
        mock_client_class.return_value = http_client(response(status_code=429))

        model = EmbeddingModel(api_key="test_key")

        with pytest.raises(RuntimeError, match="Rate limit exceeded"):
            model.embed_text("test text")

    @patch('httpx.Client')
    def test_authentication_error(self, mock_client_class):
        mock_client_class.return_value = http_client(response(status_code=401))

        model = EmbeddingModel(api_key="invalid_key")

        with pytest.raises(RuntimeError, match="Invalid API key"):
            model.embed_text("test text")

    @patch('httpx.Client')
    def test_unexpected_status(self, mock_client_class):
        mock_client_class.return_value = http_client(response(status_code=500, text="boom"))

        model = EmbeddingModel(api_key="test_key")

        with pytest.raises(RuntimeError, match="status 500"):
            model.embed_text("test text")

    @patch('httpx.Client')
    @patch('time.sleep')
    def test_timeout_with_retry(self, mock_sleep, mock_client_class):
        mock_client_class.return_value = http_client(
            httpx.TimeoutException("Timeout"),
            response(payload=[[0.1, 0.2, 0.3]])
        )

        model = EmbeddingModel(api_key="test_key", initial_delay=0.1)

        assert model.embed_text("test text") == [0.1, 0.2, 0.3]
        assert mock_sleep.called

    @patch('httpx.Client')
    @patch('time.sleep')
    def test_network_error_with_retry(self, mock_sleep, mock_client_class):
        mock_client_class.return_value = http_client(
            httpx.RequestError("Network error"),
            response(payload=[[0.1, 0.2, 0.3]])
        )

        model = EmbeddingModel(api_key="test_key", initial_delay=0.1)

        assert model.embed_text("test text") == [0.1, 0.2, 0.3]

    @patch('httpx.Client')
    def test_warmup_success(self, mock_client_class):
        mock_client_class.return_value = http_client(response(payload=[[0.1, 0.2, 0.3]]))

        model = EmbeddingModel(api_key="test_key")
        assert model.warmup() is True

    @patch('httpx.Client')
    def test_warmup_failure(self, mock_client_class):
        mock_client_class.return_value = http_client(response(status_code=401))

        model = EmbeddingModel(api_key="test_key")
        assert model.warmup() is False

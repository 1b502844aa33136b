import numpy as np
import pytest
from unittest.mock import patch
from industry_matcher.utils.embed_texts import SentenceTransformerEmbedder


@pytest.fixture
def mock_model():
    with patch("industry_matcher.utils.embed_texts.SentenceTransformer") as MockST:
        model = MockST.return_value
        model.encode.side_effect = lambda texts, show_progress_bar=False: np.ones((len(texts), 4), dtype="float64")
        yield MockST


def test_model_loads_lazily_once(mock_model):
    embedder = SentenceTransformerEmbedder("all-MiniLM-L6-v2")
    mock_model.assert_not_called()

    embedder.embed_many(["software", "restaurants"])
    embedder.embed("web")

    mock_model.assert_called_once_with("all-MiniLM-L6-v2")


def test_embed_many_returns_float32_matrix(mock_model):
    vectors = SentenceTransformerEmbedder().embed_many(["a", "b", "c"])
    assert vectors.shape == (3, 4)
    assert vectors.dtype == np.float32


def test_embed_returns_single_vector(mock_model):
    assert SentenceTransformerEmbedder().embed("software").shape == (4,)


def test_empty_input_skips_model(mock_model):
    assert SentenceTransformerEmbedder().embed_many([]).size == 0
    mock_model.assert_not_called()


def test_encoding_errors_propagate(mock_model):
    mock_model.return_value.encode.side_effect = RuntimeError("cuda oom")
    with pytest.raises(RuntimeError):
        SentenceTransformerEmbedder().embed_many(["x"])

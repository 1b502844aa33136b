from typing import List, Optional, Protocol

import numpy as np
from sentence_transformers import SentenceTransformer

from industry_matcher.logger import get_logger

logger = get_logger(__name__)

DEFAULT_EMBEDDING_MODEL = "all-MiniLM-L6-v2"


class Embedder(Protocol):
    """Shape the matcher expects from any embedding provider."""

    def embed(self, text: str) -> np.ndarray: ...

    def embed_many(self, texts: List[str]) -> np.ndarray: ...


class SentenceTransformerEmbedder:
    """
    Local embedding provider backed by a SentenceTransformer model.
    The model is loaded lazily on first use and kept for the instance lifetime.
    """

    def __init__(self, model_name: Optional[str] = None):
        self.model_name = model_name or DEFAULT_EMBEDDING_MODEL
        self._model = None

    def _get_model(self) -> SentenceTransformer:
        if self._model is None:
            try:
                logger.info(f"Loading local embedding model: {self.model_name}")
                self._model = SentenceTransformer(self.model_name)
            except Exception as e:
                logger.error(f"Failed to load SentenceTransformer model: {e}")
                raise
        return self._model

    def embed(self, text: str) -> np.ndarray:
        return self.embed_many([text])[0]

    def embed_many(self, texts: List[str]) -> np.ndarray:
        """
        Generates embeddings for a list of strings.

        Args:
            texts: A list of strings to be embedded.

        Returns:
            A float32 numpy array of shape (N, D).
        """
        if not texts:
            logger.warning("Empty list of texts passed to embed_many.")
            return np.array([]).astype("float32")

        # Ensure single string is treated as a list
        if isinstance(texts, str):
            texts = [texts]

        model = self._get_model()

        try:
            logger.info(f"Generating embeddings for {len(texts)} texts locally.")
            embeddings = model.encode(list(texts), show_progress_bar=False)
            vector_array = np.array(embeddings).astype("float32")
            logger.info(f"Successfully generated embeddings. Shape: {vector_array.shape}")
            return vector_array
        except Exception as e:
            logger.error(f"Failed to generate embeddings: {e}")
            raise



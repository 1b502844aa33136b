import faiss
import numpy as np
from industry_matcher.logger import get_logger

logger = get_logger(__name__)

class FaissStore:
    def __init__(self):
        """
        In-memory cosine-similarity index over taxonomy embeddings.
        Vectors are L2-normalized so inner product equals cosine similarity.
        Nothing is written to disk.
        """
        self.index = None
        self.size = 0

    def build_index(self, vectors: np.ndarray):
        """
        Create a new FAISS index from a set of vectors.

        Args:
            vectors: A numpy array of shape (N, D) where N is the number of vectors
                    and D is the dimensionality of the embeddings.
        """
        try:
            # FAISS requires contiguous float32
            vectors = np.ascontiguousarray(np.array(vectors, dtype="float32"))
            if vectors.ndim != 2 or vectors.shape[0] == 0:
                raise ValueError(f"Expected a non-empty (N, D) array, got shape {vectors.shape}")
            dimension = vectors.shape[1]

            logger.info(f"Building FAISS index with {len(vectors)} vectors of dimension {dimension}")

            faiss.normalize_L2(vectors)
            index = faiss.IndexFlatIP(dimension)
            index.add(vectors)

            self.index = index
            self.size = len(vectors)
        except Exception as e:
            logger.error(f"Failed to build FAISS index: {e}")
            raise

    @property
    def is_built(self) -> bool:
        return self.index is not None

    def search(self, query_vector: np.ndarray, k: int = 5):
        """
        Search the index for the k most similar vectors to the given query vector.

        Args:
            query_vector: A numpy array of shape (D,) or (1, D).
            k: The number of neighbors to return (capped at the index size).

        Returns:
            indices: Array of row indices, most similar first.
            similarities: Array of cosine similarities in [-1, 1].
        """
        if self.index is None:
            raise RuntimeError("FAISS index not built.")

        query_vector = np.ascontiguousarray(np.array(query_vector, dtype="float32"))
        if query_vector.ndim == 1:
            query_vector = query_vector.reshape(1, -1)
        faiss.normalize_L2(query_vector)

        k = min(k, self.size)
        logger.debug(f"Searching FAISS index for k={k} nearest neighbors")
        similarities, indices = self.index.search(query_vector, k)

        # Flatten to return 1D arrays since we only searched for one vector
        return indices[0], similarities[0]

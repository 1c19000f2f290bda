"""Vector store implementations.

ChromaDB is the sole implementation.  It keeps document vectors on disk at
CHROMADB_PERSIST_DIR (default: ./data/chromadb).
"""

from docembed.providers.vector_store.chromadb_provider import ChromaDBVectorStore

__all__ = ["ChromaDBVectorStore"]

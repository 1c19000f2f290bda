"""Abstract interfaces for every external collaborator.

    Interface              →  Concrete implementations
    ─────────────────────────────────────────────────────────
    IProvider              →  OpenAIProvider, AnthropicProvider, OllamaProvider
    IDocumentReader        →  TextDocumentReader, PdfDocumentReader
    IVectorStoreClient     →  ChromaDBVectorStore
"""

from docembed.interfaces.document_reader import IDocumentReader
from docembed.interfaces.provider import IProvider
from docembed.interfaces.vector_store_provider import IVectorStoreClient

__all__ = ["IDocumentReader", "IProvider", "IVectorStoreClient"]

"""Document embedding pipeline.

**read -> chunk -> embed -> store**

1. **Read** (docembed/providers/reader/) -- format-specific readers turn an
   uploaded file into plain text.
2. **Chunk** (chunker.py / SentenceChunker) -- fixed windows of sentences,
   8 per chunk with no overlap by default.
3. **Embed** (via IProvider.embed) -- one call per chunk, strictly in order.
4. **Store** (batch_writer.py / VectorBatchWriter) -- batched inserts into
   the vector store.

DocumentEmbedding (document_embedding.py) runs the stages and reports an
EmbeddingSummary.
"""

from docembed.services.ingestion.batch_writer import VectorBatchWriter
from docembed.services.ingestion.chunker import SentenceChunker
from docembed.services.ingestion.document_embedding import DocumentEmbedding, build_chunks

__all__ = [
    "DocumentEmbedding",
    "SentenceChunker",
    "VectorBatchWriter",
    "build_chunks",
]

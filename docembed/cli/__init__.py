"""Command-line tools for docembed.

- ``python -m docembed.cli embed`` -- embed an uploaded document
- ``python -m docembed.cli models`` -- list a provider's models
- ``python -m docembed.cli chat`` -- stream a chat completion to stdout

Heavy imports (providers, ChromaDB) are deferred into the handlers so
``--help`` stays fast.
"""

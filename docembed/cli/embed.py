"""Command-line interface for docembed.

Usage::

    python -m docembed.cli embed --file report.txt --model text-embedding-3-small \\
        --provider openai

    python -m docembed.cli models --provider ollama --embedding-only

    python -m docembed.cli chat --provider anthropic --model claude-3-5-haiku-latest \\
        --system "Answer briefly." "What is a vector store?"

``embed`` reads the file from UPLOAD_DIR and prints the run summary as JSON.
Provider connection details come from the providers YAML file
(PROVIDERS_CONFIG); API keys from the environment.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import signal
import sys

from docembed.config.loader import load_provider_settings
from docembed.config.settings import Settings
from docembed.models.provider import ApiProvider, ChatMessage, ChatRole, ProviderSettings
from docembed.utils.errors import DocEmbedError
from docembed.utils.logging import configure_logging


def _resolve_provider(app_settings: Settings, provider_id: str) -> ProviderSettings:
    providers = load_provider_settings(settings=app_settings)
    try:
        return providers[ApiProvider(provider_id)]
    except (KeyError, ValueError):
        configured = ", ".join(p.value for p in providers) or "none"
        raise DocEmbedError(
            message=f"Provider '{provider_id}' is not configured (configured: {configured})"
        ) from None


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


async def _handle_embed(args: argparse.Namespace, app_settings: Settings) -> int:
    from docembed.services.ingestion.document_embedding import DocumentEmbedding

    provider_settings = _resolve_provider(app_settings, args.provider)
    pipeline = DocumentEmbedding(args.file, settings=app_settings)
    summary = await pipeline.embed_and_persist_document(args.model, provider_settings)
    print(json.dumps(summary.model_dump(), indent=2))
    return 0 if summary.success else 1


async def _handle_models(args: argparse.Namespace, app_settings: Settings) -> int:
    from docembed.providers.llm import get_provider

    provider_settings = _resolve_provider(app_settings, args.provider)
    provider = get_provider(provider_settings, settings=app_settings)
    models = await provider.models(provider_settings, args.embedding_only)
    if not models:
        print("No models found.", file=sys.stderr)
        return 1
    for model in models:
        marker = "  [embedding]" if model.embedding else ""
        print(f"{model.id}{marker}")
    return 0


async def _handle_chat(args: argparse.Namespace, app_settings: Settings) -> int:
    from docembed.providers.llm import get_provider

    provider_settings = _resolve_provider(app_settings, args.provider)
    provider = get_provider(provider_settings, settings=app_settings)

    messages: list[ChatMessage] = []
    if args.system:
        messages.append(ChatMessage(role=ChatRole.SYSTEM, content=args.system))
    messages.append(ChatMessage(role=ChatRole.USER, content=args.prompt))

    result = await provider.chat_completions(
        args.model,
        messages,
        provider_settings.url,
        provider_settings.api_key,
        with_cancellation=True,
    )
    if result.error.is_error:
        print(f"Error: {result.error.error_message}", file=sys.stderr)
        return 1

    # Ctrl-C ends the stream cleanly instead of tearing down the loop.
    loop = asyncio.get_running_loop()
    with contextlib.suppress(NotImplementedError):
        loop.add_signal_handler(signal.SIGINT, provider.cancel_chat_completion_stream)

    try:
        async for payload in result.stream:
            chunk = provider.convert_response(payload)
            print(chunk.text, end="", flush=True)
    finally:
        with contextlib.suppress(NotImplementedError):
            loop.remove_signal_handler(signal.SIGINT)
    print()
    return 130 if result.stream.cancelled else 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the docembed CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m docembed.cli",
        description="Embed documents into a vector store and talk to LLM providers.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")
    vendors = [p.value for p in ApiProvider]

    # -- embed --
    embed_parser = subparsers.add_parser("embed", help="Embed an uploaded document")
    embed_parser.add_argument("--file", required=True, help="File name inside UPLOAD_DIR")
    embed_parser.add_argument("--model", required=True, help="Embedding model id")
    embed_parser.add_argument("--provider", required=True, choices=vendors, help="Provider id")

    # -- models --
    models_parser = subparsers.add_parser("models", help="List a provider's models")
    models_parser.add_argument("--provider", required=True, choices=vendors, help="Provider id")
    models_parser.add_argument(
        "--embedding-only",
        action="store_true",
        dest="embedding_only",
        help="Only list embedding models",
    )

    # -- chat --
    chat_parser = subparsers.add_parser("chat", help="Stream a chat completion")
    chat_parser.add_argument("--provider", required=True, choices=vendors, help="Provider id")
    chat_parser.add_argument("--model", required=True, help="Chat model id")
    chat_parser.add_argument("--system", default="", help="Optional system prompt")
    chat_parser.add_argument("prompt", help="User message")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

_HANDLERS = {
    "embed": _handle_embed,
    "models": _handle_models,
    "chat": _handle_chat,
}


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse the subcommand, load settings and dispatch."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    configure_logging(
        log_level=app_settings.log_level,
        json_output=app_settings.app_env == "production",
    )

    try:
        exit_code = asyncio.run(_HANDLERS[args.command](args, app_settings))
    except DocEmbedError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()

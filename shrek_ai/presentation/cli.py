import asyncio
import logging
import sys

import uvicorn

from ..config.settings import settings
from ..container import configure_container, container
from ..core.errors import CorpusLoadError, ValidationError
from ..core.services.answer_service import AnswerService
from ..core.services.document_store import DocumentStore

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


def cmd_serve():
    """Serve command - run the HTTP server."""
    from .http_app import create_app

    configure_container(settings)
    app = create_app(container)

    logger.info(f"shrek-ai server listening on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


async def _ask(question: str) -> int:
    service = container.resolve(AnswerService)
    try:
        run = service.start(question)
    except ValidationError as e:
        logger.error(str(e))
        return 2

    failed = False
    async for event in run.events():
        sys.stdout.write(event.to_sse())
        failed = failed or event.is_error
    sys.stdout.flush()
    return 1 if failed else 0


def cmd_ask(question: str) -> int:
    """Ask command - answer one question and print the SSE frames."""
    configure_container(settings)
    return asyncio.run(_ask(question))


async def _warmup() -> int:
    store = container.resolve(DocumentStore)
    try:
        documents = await store.load_all()
    except CorpusLoadError as e:
        logger.error(f"Corpus load failed: {e}")
        return 1

    rankable = sum(1 for doc in documents if doc.rankable)
    logger.info(f"Warmup complete: {rankable}/{len(documents)} documents rankable")
    return 0


def cmd_warmup() -> int:
    """Warmup command - load and embed the corpus."""
    configure_container(settings)
    return asyncio.run(_warmup())


def main():
    """CLI entry point."""
    setup_logging()

    if len(sys.argv) < 2:
        print("Usage: python -m shrek_ai.presentation.cli <command>")
        print("Commands: serve, ask <question>, warmup")
        sys.exit(1)

    command = sys.argv[1]

    if command == "serve":
        cmd_serve()
    elif command == "ask":
        if len(sys.argv) < 3:
            print("Usage: python -m shrek_ai.presentation.cli ask <question>")
            sys.exit(1)
        sys.exit(cmd_ask(" ".join(sys.argv[2:])))
    elif command == "warmup":
        sys.exit(cmd_warmup())
    else:
        print(f"Unknown command: {command}")
        sys.exit(1)


if __name__ == "__main__":
    main()

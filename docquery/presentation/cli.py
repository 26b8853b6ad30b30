
import asyncio
import json
import logging
import sys
from pathlib import Path

from docquery.config.settings import settings
from docquery.container import configure_container, container
from docquery.core.errors import DocQueryError, QueryValidationError
from docquery.core.services.analysis_service import AnalysisService
from docquery.core.services.query_service import QueryService
from docquery.infrastructure.document_loaders import DirectoryDocumentProvider

logger = logging.getLogger(__name__)

USAGE = """Usage: python -m docquery.presentation.cli <command> [args]
Commands:
  query <question>    Answer a question from documents in DOCQUERY_DOCS_PATH
  summarize <file>    Summarize a document
  actions <file>      Extract action items from a document
  suggest <file>      Suggest improvements to a document"""


async def cmd_query(question: str) -> int:
    """Query command - answer a question from the docs folder."""
    documents = DirectoryDocumentProvider(settings.docs_path).load()
    query_service = container.resolve(QueryService)

    try:
        response = await query_service.query(question, documents, user_id="cli")
    except QueryValidationError as e:
        print(f"Invalid query: {e}")
        return 1
    except DocQueryError:
        print("Failed to process query")
        return 1

    print(json.dumps(response.to_dict(), indent=2, ensure_ascii=False))
    return 0


async def cmd_analyze(command: str, file_path: str) -> int:
    """Analysis commands - summarize, actions, suggest."""
    path = Path(file_path)
    if not path.is_file():
        print(f"File not found: {file_path}")
        return 1

    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        print(f"File is not UTF-8 text: {file_path}")
        return 1

    analysis = container.resolve(AnalysisService)

    try:
        if command == "summarize":
            print(await analysis.summarize(content))
            return 0

        if command == "actions":
            items = await analysis.extract_action_items(content)
        else:
            items = await analysis.suggest_improvements(content)
    except DocQueryError as e:
        logger.error(f"Analysis failed: {e}")
        print(f"Failed to {command} document")
        return 1

    for item in items:
        print(f"- {item}")
    return 0


def main():
    """CLI entry point."""
    logging.basicConfig(level=settings.log_level, format="%(message)s")

    if len(sys.argv) < 3:
        print(USAGE)
        sys.exit(1)

    command = sys.argv[1]
    argument = " ".join(sys.argv[2:])

    configure_container(settings)

    if command == "query":
        code = asyncio.run(cmd_query(argument))
    elif command in ("summarize", "actions", "suggest"):
        code = asyncio.run(cmd_analyze(command, argument))
    else:
        print(f"Unknown command: {command}")
        code = 1

    sys.exit(code)


if __name__ == "__main__":
    main()

import json
import logging
from pathlib import Path

from ...core.errors import CorpusLoadError
from ...core.models.document import Document

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("id", "title", "content")


class JsonCorpusLoader:
    """Corpus stored as a JSON array of ``{id, title, content}`` objects."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Document]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise CorpusLoadError(f"Cannot read corpus {self._path}: {e}") from e
        except UnicodeDecodeError as e:
            raise CorpusLoadError(f"Malformed corpus {self._path}: not UTF-8 ({e})") from e

        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorpusLoadError(f"Malformed corpus {self._path}: {e}") from e

        return parse_documents(records, source=str(self._path))


def parse_documents(records: object, source: str = "<corpus>") -> list[Document]:
    """Convert decoded JSON records to documents.

    Raises:
        CorpusLoadError: If the records are not a list of well-formed objects
            or two records share an id.
    """
    if not isinstance(records, list):
        raise CorpusLoadError(f"Corpus {source} must be a JSON array")

    documents = []
    seen: set[str] = set()
    for i, record in enumerate(records):
        if not isinstance(record, dict):
            raise CorpusLoadError(f"Corpus {source}: entry {i} is not an object")
        for name in _REQUIRED_FIELDS:
            if not isinstance(record.get(name), str):
                raise CorpusLoadError(f"Corpus {source}: entry {i} has no string '{name}'")
        if record["id"] in seen:
            raise CorpusLoadError(f"Corpus {source}: duplicate id '{record['id']}'")
        seen.add(record["id"])

        documents.append(
            Document(id=record["id"], title=record["title"], content=record["content"])
        )

    logger.info(f"Read {len(documents)} documents from {source}")
    return documents

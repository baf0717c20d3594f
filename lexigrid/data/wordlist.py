"""Word-list parsing for the command line and library callers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List, Union

from ..core.exceptions import WordListError
from ..core.models import Word
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


def parse_word_entries(entries: Iterable[str], id_prefix: str = "word") -> List[Word]:
    """Turn ``WORD`` / ``WORD:Clue`` strings into :class:`Word` objects.

    Blank entries and ``#`` comments are skipped. Ids are assigned in order
    as ``<id_prefix>-<n>``, counting only kept entries.
    """

    words: List[Word] = []
    for item in entries:
        item = item.strip()
        if not item or item.startswith("#"):
            continue
        term, _, clue = item.partition(":")
        words.append(Word(id=f"{id_prefix}-{len(words) + 1}", term=term.strip(), clue=clue.strip()))
    return words


def words_from_records(records: Any) -> List[Word]:
    """Build words from a decoded JSON list of ``{id, term, clue}`` objects."""

    if not isinstance(records, list):
        raise WordListError("Word list JSON must be a list of objects")
    words: List[Word] = []
    for index, record in enumerate(records, start=1):
        if not isinstance(record, dict) or "term" not in record:
            raise WordListError(f"Entry {index} has no 'term' field")
        words.append(
            Word(
                id=str(record.get("id") or f"word-{index}"),
                term=str(record["term"]),
                clue=str(record.get("clue") or ""),
            )
        )
    return words


def load_words(path: Union[str, Path]) -> List[Word]:
    """Load a word list from a text file or a ``.json`` file."""

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise WordListError(f"Cannot read word list {path}: {exc}") from exc

    if path.suffix.lower() == ".json":
        try:
            records = json.loads(text)
        except json.JSONDecodeError as exc:
            raise WordListError(f"Invalid JSON in {path}: {exc}") from exc
        words = words_from_records(records)
    else:
        words = parse_word_entries(text.splitlines())
    LOGGER.info("Loaded %d words from %s", len(words), path)
    return words

import logging
import threading
from typing import Iterable, Optional, Set

logger = logging.getLogger(__name__)

MIN_WORD_LENGTH = 2


class DictionaryNotLoadedError(RuntimeError):
    pass


class Dictionary:
    """Lowercase word set loaded once from a one-word-per-line file."""

    def __init__(self):
        self._words: Set[str] = set()
        self._loaded = False
        self._lock = threading.Lock()
        self.path: Optional[str] = None

    @classmethod
    def from_words(cls, words: Iterable[str]) -> 'Dictionary':
        dictionary = cls()
        dictionary._words = _normalize(words)
        dictionary._loaded = True
        return dictionary

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self, path: str) -> None:
        """Read the word list. Calling it again after a successful load is a no-op.

        I/O errors propagate; the server must not start without a dictionary.
        """
        with self._lock:
            if self._loaded:
                return
            logger.info(f"[dictionary-load] path={path}")
            with open(path, encoding='utf-8') as fh:
                words = _normalize(fh)
            self._words = words
            self._loaded = True
            self.path = path
            logger.info(f"[dictionary-loaded] words={len(words)}")

    def is_valid_word(self, word: str) -> bool:
        if not self._loaded:
            raise DictionaryNotLoadedError('Dictionary not loaded yet')
        normalized = (word or '').strip().lower()
        if len(normalized) < MIN_WORD_LENGTH:
            return False
        return normalized in self._words

    def word_count(self) -> int:
        return len(self._words)


def _normalize(words: Iterable[str]) -> Set[str]:
    return {w.strip().lower() for w in words if w.strip()}

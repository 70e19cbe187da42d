"""Word list loading and candidate retrieval."""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

from ..core.exceptions import DictionaryLoadError
from ..utils.logger import get_logger
from .normalization import clean_word, is_plain_word


LOGGER = get_logger(__name__)


@dataclass
class DictionaryConfig:
    """Configuration for dictionary loading and filtering."""

    path: Path | str | None = None
    min_length: int = 2
    max_length: int = 15
    encoding: str = "utf-8"


def letter_mask(text: str) -> int:
    """Bit set of the distinct letters in ``text`` (A is bit 0)."""

    mask = 0
    for char in text:
        mask |= 1 << (ord(char) - 65)
    return mask


@dataclass(frozen=True)
class _IndexedWord:
    surface: str
    mask: int
    counts: Tuple[Tuple[str, int], ...]


class WordDictionary:
    """Loads an uppercase word list from a newline separated file or iterable."""

    def __init__(self, config: DictionaryConfig, words: Optional[Iterable[str]] = None) -> None:
        self.config = config
        self._surfaces: Set[str] = set()
        self._by_length: Dict[int, List[str]] = defaultdict(list)
        self._indexed: List[_IndexedWord] = []
        if words is None:
            words = self._read_source()
        self._hydrate(words)

    @classmethod
    def from_words(
        cls,
        words: Iterable[str],
        min_length: int = 2,
        max_length: int = 15,
    ) -> "WordDictionary":
        return cls(DictionaryConfig(min_length=min_length, max_length=max_length), words=words)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def _read_source(self) -> List[str]:
        if self.config.path is None:
            raise DictionaryLoadError("No word list path configured")
        source = Path(self.config.path)
        if not source.exists():
            raise DictionaryLoadError(f"Missing word list: {source}")
        try:
            text = source.read_text(encoding=self.config.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise DictionaryLoadError(f"Unable to read word list {source}: {exc}") from exc
        return [line for line in text.splitlines() if line.strip() and not line.startswith("#")]

    def _hydrate(self, words: Iterable[str]) -> None:
        for raw in words:
            if not is_plain_word(raw):
                continue
            surface = clean_word(raw)
            if not self.config.min_length <= len(surface) <= self.config.max_length:
                continue
            if surface in self._surfaces:
                continue
            self._surfaces.add(surface)

        # Sorted order keeps every downstream enumeration deterministic.
        for surface in sorted(self._surfaces, key=lambda word: (len(word), word)):
            self._by_length[len(surface)].append(surface)
            self._indexed.append(
                _IndexedWord(
                    surface=surface,
                    mask=letter_mask(surface),
                    counts=tuple(sorted(Counter(surface).items())),
                )
            )
        LOGGER.info("Loaded %s dictionary words", len(self._surfaces))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def sanitize(self, text: str) -> str:
        return clean_word(text)

    def contains(self, word: str) -> bool:
        return self.sanitize(word) in self._surfaces

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self.contains(word)

    def __len__(self) -> int:
        return len(self._surfaces)

    def iter_length(self, length: int) -> List[str]:
        return self._by_length.get(length, [])

    def iter_up_to(self, max_length: int) -> Iterator[str]:
        """Words no longer than ``max_length``, shortest first then alphabetical."""

        for entry in self._indexed:
            if len(entry.surface) > max_length:
                break
            yield entry.surface

    def formable_words(
        self,
        letters: Sequence[str],
        min_length: int = 2,
        max_length: Optional[int] = None,
    ) -> List[str]:
        """Every word spelled by a sub-multiset of ``letters``."""

        rack = Counter(letter.upper() for letter in letters)
        rack_mask = letter_mask("".join(rack))
        limit = len(letters) if max_length is None else min(max_length, len(letters))
        found: List[str] = []
        for entry in self._indexed:
            length = len(entry.surface)
            if length > limit:
                break
            if length < min_length or entry.mask & ~rack_mask:
                continue
            if all(rack[char] >= count for char, count in entry.counts):
                found.append(entry.surface)
        return found

"""Constrained letter pool sampling."""

from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.constants import LETTER_DISTRIBUTION, VOWELS, is_vowel
from ..core.exceptions import ConfigError
from ..data.dictionary import WordDictionary
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


# Hand-checked sets with no rare letters and several long words each.
FALLBACK_SETS: Dict[int, Tuple[str, ...]] = {
    14: (
        "AEIOUBCDGLNRST",
        "AEIOCDFHLMNRST",
        "AEIUBDGLMNPRST",
        "AEOUCDHLMNPRSW",
        "AEIOBDFGLNRSTY",
        "AEIOCGHLNPRSTW",
        "AEIUBCDLMNRSTW",
        "AEOUBCDGLNRSTY",
    ),
    12: (
        "AEIOBCDGLNRT",
        "AEIOCDFHLNRT",
        "AEIUBDGLMNRT",
    ),
}

# Letters used to stretch a vetted set to a larger pool, most useful first.
_TOP_UP_ORDER = "ESRTNLAIODCPMHGBUYFWKV"


def _default_companions() -> Dict[str, Tuple[str, ...]]:
    return {"Q": ("U",)}


@dataclass
class LetterPoolConfig:
    size: int = 14
    min_vowels: int = 4
    max_vowels: int = 6
    min_unique: int = 10
    max_duplicates: int = 2
    distribution: Dict[str, int] = field(default_factory=lambda: dict(LETTER_DISTRIBUTION))
    rare_letters: Tuple[str, ...] = ("Q", "X", "Z", "J", "K")
    max_rare_letters: int = 1
    companions: Dict[str, Tuple[str, ...]] = field(default_factory=_default_companions)
    min_three_letter_words: int = 3
    min_four_letter_words: int = 2
    long_word_lengths: Tuple[int, int] = (5, 7)
    min_long_words: int = 1
    max_attempts: int = 100

    def validate(self) -> None:
        if self.size < 1:
            raise ConfigError("Letter pool size must be positive")
        if not 0 <= self.min_vowels <= self.max_vowels <= self.size:
            raise ConfigError(
                f"Vowel bounds {self.min_vowels}-{self.max_vowels} do not fit a pool of {self.size}"
            )
        if self.max_duplicates < 1:
            raise ConfigError("max_duplicates must be at least 1")
        if self.max_attempts < 1:
            raise ConfigError("max_attempts must be at least 1")
        if not vetted_pools(self):
            raise ConfigError(
                f"No vetted letter set fits a pool of {self.size} with "
                f"{self.min_vowels}-{self.max_vowels} vowels and {self.min_unique} unique letters"
            )


@dataclass(frozen=True)
class LetterPool:
    letters: Tuple[str, ...]
    is_fallback: bool = False

    @property
    def vowels(self) -> int:
        return sum(1 for letter in self.letters if is_vowel(letter))

    @property
    def consonants(self) -> int:
        return len(self.letters) - self.vowels

    def __len__(self) -> int:
        return len(self.letters)

    def __str__(self) -> str:
        return "".join(self.letters)


def sort_letters(letters: Sequence[str]) -> Tuple[str, ...]:
    """Vowels first, then consonants, each alphabetical."""

    vowels = sorted(letter for letter in letters if is_vowel(letter))
    consonants = sorted(letter for letter in letters if not is_vowel(letter))
    return tuple(vowels + consonants)


def letter_constraint_violation(letters: Sequence[str], config: LetterPoolConfig) -> Optional[str]:
    """Return why ``letters`` breaks the pool composition rules, or ``None``."""

    if len(letters) != config.size:
        return f"pool has {len(letters)} letters, expected {config.size}"
    vowels = sum(1 for letter in letters if is_vowel(letter))
    if not config.min_vowels <= vowels <= config.max_vowels:
        return f"{vowels} vowels outside {config.min_vowels}-{config.max_vowels}"
    counts = Counter(letters)
    if len(counts) < config.min_unique:
        return f"only {len(counts)} unique letters"
    letter, most = counts.most_common(1)[0]
    if most > config.max_duplicates:
        return f"{letter} appears {most} times"
    rare = sum(count for char, count in counts.items() if char in config.rare_letters)
    if rare > config.max_rare_letters:
        return f"{rare} rare letters"
    for char in counts:
        missing = [needed for needed in config.companions.get(char, ()) if needed not in counts]
        if missing:
            return f"{char} needs {''.join(missing)}"
    return None


def playability_violation(
    letters: Sequence[str],
    dictionary: WordDictionary,
    config: LetterPoolConfig,
) -> Optional[str]:
    """Return why ``letters`` would make a dull puzzle, or ``None``."""

    low, high = config.long_word_lengths
    formable = dictionary.formable_words(letters, min_length=3, max_length=max(4, high))
    by_length = Counter(len(word) for word in formable)
    if by_length[3] < config.min_three_letter_words:
        return f"only {by_length[3]} three-letter words"
    if by_length[4] < config.min_four_letter_words:
        return f"only {by_length[4]} four-letter words"
    long_words = sum(count for length, count in by_length.items() if low <= length <= high)
    if long_words < config.min_long_words:
        return f"no word of {low}-{high} letters"
    return None


class LetterPoolGenerator:
    """Draws letter pools until one satisfies every composition and playability rule."""

    def __init__(self, config: LetterPoolConfig, dictionary: WordDictionary, rng: random.Random) -> None:
        config.validate()
        self.config = config
        self.dictionary = dictionary
        self.rng = rng
        self._vowel_bag: List[str] = []
        self._consonant_bag: List[str] = []
        for letter, weight in config.distribution.items():
            bag = self._vowel_bag if letter in VOWELS else self._consonant_bag
            bag.extend(letter * weight)

    def generate(self) -> LetterPool:
        for attempt in range(1, self.config.max_attempts + 1):
            drawn = self._draw()
            reason = letter_constraint_violation(drawn, self.config) or playability_violation(
                drawn, self.dictionary, self.config
            )
            if reason is None:
                LOGGER.debug("Letter pool accepted after %s attempts", attempt)
                return LetterPool(letters=sort_letters(drawn))
        LOGGER.warning(
            "No letter pool passed after %s attempts; using a vetted set", self.config.max_attempts
        )
        return self.fallback_pool()

    def _draw(self) -> List[str]:
        config = self.config
        vowels = list(self._vowel_bag)
        consonants = list(self._consonant_bag)
        self.rng.shuffle(vowels)
        self.rng.shuffle(consonants)

        counts: Counter = Counter()
        drawn: List[str] = []

        def take(bag: List[str], target: int) -> int:
            index = 0
            taken = 0
            while taken < target and index < len(bag) and len(drawn) < config.size:
                letter = bag[index]
                index += 1
                if counts[letter] < config.max_duplicates:
                    drawn.append(letter)
                    counts[letter] += 1
                    taken += 1
            return index

        target_vowels = self.rng.randint(config.min_vowels, config.max_vowels)
        vowel_index = take(vowels, target_vowels)
        consonant_index = take(consonants, config.size - target_vowels)

        remainder = vowels[vowel_index:] + consonants[consonant_index:]
        self.rng.shuffle(remainder)
        take(remainder, config.size - len(drawn))
        return drawn

    def fallback_pool(self) -> LetterPool:
        """One of the vetted sets, fitted to the configured size and vowel bounds."""

        letters = self.rng.choice(vetted_pools(self.config))
        return LetterPool(letters=sort_letters(letters), is_fallback=True)


def fit_letters(letters: Sequence[str], config: LetterPoolConfig) -> List[str]:
    """Trim or extend a vetted set to ``config.size`` with the vowel count inside its bounds.

    Missing letters come from the top-up order, unseen letters before
    duplicates; rare letters are never added.
    """

    vowels = [letter for letter in letters if is_vowel(letter)]
    consonants = [letter for letter in letters if not is_vowel(letter)]
    target = min(max(len(vowels), config.min_vowels), config.max_vowels, config.size)
    extras = [letter for letter in _TOP_UP_ORDER if letter not in config.rare_letters]
    vowels = _resize(vowels, target, [letter for letter in extras if is_vowel(letter)], config)
    consonants = _resize(
        consonants,
        config.size - len(vowels),
        [letter for letter in extras if not is_vowel(letter)],
        config,
    )
    return vowels + consonants


def _resize(letters: List[str], target: int, extras: Sequence[str], config: LetterPoolConfig) -> List[str]:
    if len(letters) >= target:
        return letters[:target]
    resized = list(letters)
    counts = Counter(resized)
    for allowed in range(1, config.max_duplicates + 1):
        for letter in extras:
            if len(resized) >= target:
                return resized
            if counts[letter] < allowed:
                resized.append(letter)
                counts[letter] += 1
    return resized


def vetted_pools(config: LetterPoolConfig) -> List[List[str]]:
    """Vetted sets, fitted where needed, that pass every composition rule of ``config``."""

    pools: List[List[str]] = []
    for vetted in FALLBACK_SETS.get(config.size, FALLBACK_SETS[14]):
        for letters in (list(vetted), fit_letters(vetted, config)):
            if letter_constraint_violation(letters, config) is None:
                pools.append(letters)
                break
    return pools


def generate_letters(
    rng: random.Random,
    dictionary: WordDictionary,
    config: Optional[LetterPoolConfig] = None,
) -> LetterPool:
    """Sample a letter pool; falls back to a vetted set instead of failing."""

    return LetterPoolGenerator(config or LetterPoolConfig(), dictionary, rng).generate()

"""Custom exception hierarchy for puzzle generation."""


class PuzzleError(Exception):
    """Base exception for generator failures."""


class ConfigError(PuzzleError):
    """Raised when a configuration cannot describe a playable puzzle."""


class DictionaryLoadError(PuzzleError):
    """Raised when the word list cannot be read."""


class WordListDownloadError(PuzzleError):
    """Raised when a remote word list cannot be fetched."""


class PlacementError(PuzzleError):
    """Raised when a tile placement breaks a placement rule."""

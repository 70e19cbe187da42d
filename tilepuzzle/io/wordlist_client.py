"""Lightweight HTTP client for fetching word lists."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import requests

from ..core.exceptions import WordListDownloadError
from ..utils.logger import get_logger

LOGGER = get_logger(__name__)


class WordListClient:
    """Downloads newline separated word lists over HTTP."""

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def fetch(self, url: str) -> List[str]:
        """Return the non-empty lines of the word list at ``url``."""
        try:
            response = self.session.get(url, timeout=self.timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as exc:  # pragma: no cover - network failure
            raise WordListDownloadError(f"Word list request failed: {exc}") from exc

        lines = [line.strip() for line in response.text.splitlines()]
        words = [line for line in lines if line and not line.startswith("#")]
        if not words:
            LOGGER.warning("Word list at %s is empty", url)
            raise WordListDownloadError(f"Word list at {url} contained no words")
        return words

    def download(self, url: str, destination: Path | str) -> Path:
        """Fetch ``url`` and write it to ``destination`` one word per line."""
        words = self.fetch(url)
        target = Path(destination)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("\n".join(words) + "\n", encoding="utf-8")
        LOGGER.info("Saved %s words from %s to %s", len(words), url, target)
        return target

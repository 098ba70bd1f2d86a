"""Strategy implementations for fetching a year's CSV source file.

This module defines the SourceFetcher interface and concrete strategies
for reading yearly files from a local directory or over HTTP.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
import logging

import requests

from .utils.errors import FetchError

logger = logging.getLogger('SourceFetcher')


class SourceFetcher(ABC):
    """Abstract strategy interface for fetching one year's CSV text."""

    @abstractmethod
    def fetch_text(self, year: str) -> str:
        """Fetch the CSV text for a year.

        Args:
            year: Year identifier (e.g., '2024')

        Returns:
            Raw CSV text

        Raises:
            FetchError: if the file is unavailable
        """
        ...

    @staticmethod
    def file_name(year: str) -> str:
        return f"{year}.csv"


class LocalFileSourceFetcher(SourceFetcher):
    """Strategy for reading yearly files from a directory.

    Args:
        directory: Directory containing `<year>.csv` files
    """

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def fetch_text(self, year: str) -> str:
        file_path = self.directory / self.file_name(year)
        if not file_path.exists():
            raise FetchError(year, f"File not found: {file_path}")

        try:
            return file_path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise FetchError(year, e) from e


class HTTPSourceFetcher(SourceFetcher):
    """Strategy for fetching yearly files from a web server.

    Args:
        base_url: URL prefix; files are fetched from `<base_url>/<year>.csv`
        timeout: HTTP request timeout in seconds
        session: Optional requests session (created if omitted)
    """

    def __init__(self, base_url: str, timeout: float = 10.0, session: requests.Session | None = None):
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def url_for(self, year: str) -> str:
        return f"{self.base_url.rstrip('/')}/{self.file_name(year)}"

    def fetch_text(self, year: str) -> str:
        url = self.url_for(year)
        logger.debug(f"Fetching {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(year, e) from e

        if response.status_code >= 400:
            raise FetchError(year, f"HTTP {response.status_code} {response.reason or ''}".strip())

        return response.text

    def cleanup(self) -> None:
        self.session.close()

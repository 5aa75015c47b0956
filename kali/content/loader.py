"""Content loader for fetching the course catalog from a URL."""

import logging
from typing import Dict, Optional

import httpx
import yaml

from ..constants import CATALOG_FETCH_RETRIES, CATALOG_FETCH_TIMEOUT
from .course import Course, load_course, parse_course

logger = logging.getLogger(__name__)


class ContentLoader:
    """Loads and caches course catalogs from URLs or local files."""

    def __init__(
        self,
        timeout: int = CATALOG_FETCH_TIMEOUT,
        max_retries: int = CATALOG_FETCH_RETRIES,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.max_retries = max_retries
        self._transport = transport
        self._cache: Dict[str, Course] = {}

    async def load(self, path: str, url: Optional[str] = None) -> Course:
        """Load the catalog from ``url`` if given, otherwise from ``path``."""
        if url:
            return await self.fetch_course(url)
        course = load_course(path)
        logger.info(f"Loaded course {course.name!r} from {path}: {len(course.lessons)} lessons")
        return course

    async def fetch_course(self, url: str) -> Course:
        """Fetch and parse a course YAML document.

        Args:
            url: The URL serving the course YAML

        Returns:
            The parsed Course

        Raises:
            httpx.HTTPError: If every attempt fails; the last error is re-raised
        """
        if url in self._cache:
            return self._cache[url]

        text = await self._fetch_url(url)
        course = parse_course(yaml.safe_load(text))
        self._cache[url] = course
        logger.info(f"Loaded course {course.name!r} from {url}: {len(course.lessons)} lessons")
        return course

    async def _fetch_url(self, url: str) -> str:
        """Fetch content from a URL, retrying on timeouts."""
        for attempt in range(self.max_retries):
            try:
                async with httpx.AsyncClient(
                    timeout=self.timeout, transport=self._transport
                ) as client:
                    response = await client.get(url)
                    response.raise_for_status()
                    return response.text

            except httpx.TimeoutException:
                logger.warning(f"Timeout fetching {url} (attempt {attempt + 1})")
                if attempt == self.max_retries - 1:
                    raise
            except httpx.HTTPStatusError as e:
                # Don't retry on HTTP errors
                logger.error(f"HTTP error fetching {url}: {e.response.status_code}")
                raise

        raise httpx.TimeoutException(f"No attempts made to fetch {url}")

    def clear_cache(self) -> None:
        """Clear the catalog cache."""
        self._cache.clear()
        logger.info("Catalog cache cleared")

    def invalidate(self, url: str) -> None:
        """Drop a single cached catalog."""
        if self._cache.pop(url, None) is not None:
            logger.info(f"Cache invalidated for {url}")

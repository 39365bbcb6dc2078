"""GitHub REST corpus loader for open issues and pull requests."""

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from ..config.settings import get_settings
from ..errors import CorpusFetchError, FatalInputError
from ..schemas.document import Document, DocumentKind
from .base import BaseAPIClient, RateLimitError, with_retry

logger = logging.getLogger(__name__)

PER_PAGE = 100
MAX_PAGES = 50


def parse_github_timestamp(value: str) -> datetime:
    """Parse GitHub's ISO-8601 timestamps (``2024-01-31T12:00:00Z``)."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def item_to_document(item: dict[str, Any]) -> Document:
    """Convert a GitHub issues-API item into a Document."""
    kind = DocumentKind.PULL_REQUEST if "pull_request" in item else DocumentKind.ISSUE
    user = item.get("user") or {}
    return Document(
        id=item["number"],
        title=item.get("title") or "",
        body=item.get("body") or "",
        created_at=parse_github_timestamp(item["created_at"]),
        kind=kind,
        url=item.get("html_url"),
        author=user.get("login"),
    )


class GitHubCorpusLoader(BaseAPIClient):
    """
    Loads every open item of a repository through the issues endpoint.

    The issues endpoint also returns pull requests; they are kept or
    dropped according to ``include_pull_requests``.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        include_pull_requests: bool = True,
        max_pages: int = MAX_PAGES,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        super().__init__(
            base_url=base_url or settings.github_api_url,
            token=token if token is not None else settings.github_token,
            transport=transport,
        )
        self.include_pull_requests = include_pull_requests
        self.max_pages = max_pages

    def _get_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "repo-triage",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _handle_response_error(self, response: httpx.Response, owner: str, repo: str) -> None:
        """Map GitHub error responses to triage errors."""
        status = response.status_code
        if status < 400:
            return

        rate_limited = status == 429 or (
            status == 403 and response.headers.get("X-RateLimit-Remaining") == "0"
        )
        if rate_limited:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                "Rate limited by GitHub",
                retry_after=int(retry_after) if retry_after else None,
            )
        if status in (401, 403):
            raise FatalInputError(
                f"Not authorized to read {owner}/{repo}", status_code=401
            )
        if status == 404:
            raise FatalInputError(
                f"Repository {owner}/{repo} not found", status_code=404
            )
        raise CorpusFetchError(f"GitHub API error {status}: {response.text[:200]}")

    @with_retry()
    async def _fetch_page(self, owner: str, repo: str, page: int) -> list[dict[str, Any]]:
        response = await self.client.get(
            f"/repos/{owner}/{repo}/issues",
            params={"state": "open", "per_page": PER_PAGE, "page": page},
        )
        self._handle_response_error(response, owner, repo)
        return response.json()

    async def list_open_items(self, owner: str, repo: str) -> list[Document]:
        """
        Fetch all open items, following pagination.

        Raises:
            FatalInputError: Unauthorized or unknown repository
            CorpusFetchError: Network failure or unexpected API error
        """
        documents: list[Document] = []

        for page in range(1, self.max_pages + 1):
            try:
                items = await self._fetch_page(owner, repo, page)
            except (RateLimitError, httpx.HTTPError) as e:
                raise CorpusFetchError(f"Failed to fetch {owner}/{repo}: {e}") from e

            for item in items:
                if "pull_request" in item and not self.include_pull_requests:
                    continue
                documents.append(item_to_document(item))

            if len(items) < PER_PAGE:
                break
        else:
            logger.warning(
                f"Stopped after {self.max_pages} pages for {owner}/{repo}; corpus truncated"
            )

        logger.info(f"Fetched {len(documents)} open items from {owner}/{repo}")
        return documents

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from .errors import ApiError, InvalidInputError, RepoNotFoundError, ValidationFailedError

# Set up logging
logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"

# Rate limiting constants
RATE_LIMIT_RESET_HEADER = "X-RateLimit-Reset"
RATE_LIMIT_REMAINING_HEADER = "X-RateLimit-Remaining"
NOT_FOUND_STATUS_CODE = 404
UNPROCESSABLE_STATUS_CODE = 422


@dataclass
class Repository:
    """Repository metadata returned by a sync.

    Attributes:
        url: Web URL of the repository.
        name: Full "owner/repo" name.
        default_branch: Branch pull requests target by default.
    """

    url: str
    name: str
    default_branch: str


@dataclass
class CreatedPullRequest:
    """The subset of a newly created pull request the session reports."""

    number: int | None
    html_url: str | None


def _error_message(response: httpx.Response | None) -> str:
    """Build a readable message from a GitHub error response.

    GitHub sends `{"message": ..., "errors": [{"message": ...}, ...]}`; the
    detail messages carry the useful part for 422 responses.
    """
    if response is None:
        return "no response"
    try:
        data = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if not isinstance(data, dict):
        return str(data)
    message = str(data.get("message") or f"HTTP {response.status_code}")
    details: list[str] = []
    for err in data.get("errors") or []:
        if isinstance(err, dict):
            detail = err.get("message") or err.get("code")
            if detail:
                details.append(str(detail))
        elif err:
            details.append(str(err))
    if details:
        return f"{message}: {'; '.join(details)}"
    return message


def _expect_object(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ApiError(f"Unexpected response body: expected an object, got {type(data).__name__}")
    return data


class GitHubClient:
    """GitHub REST client for reading repository metadata and opening pull requests."""

    def __init__(self, max_retries: int = 3, timeout: float = 20) -> None:
        """Initialize the client.

        Args:
            max_retries: Maximum number of retries for network failures.
            timeout: Per-request timeout in seconds.
        """
        self._max_retries = max_retries
        self._timeout = timeout
        self._rate_limit_remaining = 999  # Updated after the first response
        self._rate_limit_reset_time = 0

    @staticmethod
    def _headers(token: str) -> dict[str, str]:
        return {
            "Accept": "application/vnd.github+json",
            "User-Agent": "prtui",
            "Authorization": f"Bearer {token}",
        }

    @staticmethod
    def _check_target(owner: str, repo: str, token: str | None) -> str:
        if not token:
            raise InvalidInputError("token", "GitHub token is not set")
        if not owner:
            raise InvalidInputError("owner", "Repository owner is empty")
        if not repo:
            raise InvalidInputError("repository", "Repository name is empty")
        return token

    async def _request(
        self,
        method: str,
        url: str,
        token: str,
        *,
        path: str,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return parsed JSON, mapping failures to prtui errors.

        Args:
            method: HTTP method.
            url: Absolute endpoint URL.
            token: Personal access token for the Authorization header.
            path: "owner/repo" string used in not-found errors.
            payload: Optional JSON body.

        Returns:
            The JSON-decoded response body.

        Raises:
            ValidationFailedError: On HTTP 422.
            RepoNotFoundError: On HTTP 404.
            ApiError: On any other HTTP or network failure.
        """
        if self._rate_limit_remaining <= 1 and time.time() < self._rate_limit_reset_time:
            sleep_time = self._rate_limit_reset_time - time.time() + 1  # Add 1 second buffer
            logger.warning(f"Rate limited. Sleeping for {sleep_time} seconds.")
            await asyncio.sleep(sleep_time)

        for attempt in range(self._max_retries + 1):
            try:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    r = await client.request(method, url, headers=self._headers(token), json=payload)
                    self._update_rate_limit_info(r)
                    r.raise_for_status()
                    try:
                        return r.json()
                    except ValueError as e:
                        logger.error(f"Invalid JSON in {r.status_code} response for {method} {url}")
                        raise ApiError("Invalid JSON in response", r.status_code) from e
            except httpx.HTTPStatusError as e:
                status_code = getattr(e.response, "status_code", None)
                message = _error_message(e.response)
                logger.error(f"HTTP error {status_code} for {method} {url}: {message}")
                if status_code == UNPROCESSABLE_STATUS_CODE:
                    raise ValidationFailedError(message) from e
                if status_code == NOT_FOUND_STATUS_CODE:
                    raise RepoNotFoundError(path) from e
                raise ApiError(message, status_code) from e
            except httpx.RequestError as e:
                # POSTs are not replayed; a timed-out create may still have succeeded.
                if method == "GET" and attempt < self._max_retries:
                    logger.warning(f"Network error (attempt {attempt + 1}/{self._max_retries + 1}): {e}")
                    await asyncio.sleep(2**attempt)  # Exponential backoff
                    continue
                logger.error(f"Network error for {method} {url}: {e}")
                raise ApiError(str(e) or e.__class__.__name__) from e

        # Unreachable: every branch above returns, raises or continues
        raise ApiError("Max retries exceeded")

    def _update_rate_limit_info(self, response: httpx.Response) -> None:
        """Update rate limit information from response headers.

        Args:
            response: The HTTP response to extract rate limit info from.
        """
        try:
            remaining = response.headers.get(RATE_LIMIT_REMAINING_HEADER)
            reset = response.headers.get(RATE_LIMIT_RESET_HEADER)
            if remaining is not None:
                self._rate_limit_remaining = int(remaining)
            if reset is not None:
                self._rate_limit_reset_time = int(reset)
        except (TypeError, ValueError, AttributeError):
            # Unparseable rate limit headers are ignored
            pass

    async def get_repository(self, owner: str, repo: str, token: str | None) -> Repository:
        """Fetch repository metadata.

        Args:
            owner: Repository owner/org login.
            repo: Repository name.
            token: Personal access token; an empty token fails without a request.

        Returns:
            The repository's URL, full name and default branch.

        Raises:
            InvalidInputError: If the token, owner or name is empty.
            RepoNotFoundError: If GitHub reports the repository as missing.
            ApiError: On any other failure.
        """
        token = self._check_target(owner, repo, token)
        url = f"{GITHUB_API}/repos/{owner}/{repo}"
        data = _expect_object(await self._request("GET", url, token, path=f"{owner}/{repo}"))
        return Repository(
            url=data.get("html_url") or "",
            name=data.get("full_name") or data.get("name") or f"{owner}/{repo}",
            default_branch=data.get("default_branch") or "",
        )

    async def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        head: str,
        base: str,
        body: str,
        token: str | None,
    ) -> CreatedPullRequest:
        """Open a pull request.

        Args:
            owner: Repository owner/org login.
            repo: Repository name.
            title: PR title.
            head: Source branch.
            base: Target branch.
            body: PR description.
            token: Personal access token; an empty token fails without a request.

        Returns:
            The created PR's number and web URL (either may be missing).

        Raises:
            InvalidInputError: If the token, owner or name is empty.
            ValidationFailedError: If GitHub rejects the PR (exists already, no commits, ...).
            RepoNotFoundError: If the repository is missing or not accessible.
            ApiError: On any other failure.
        """
        token = self._check_target(owner, repo, token)
        url = f"{GITHUB_API}/repos/{owner}/{repo}/pulls"
        payload = {"title": title, "head": head, "base": base, "body": body}
        data = _expect_object(await self._request("POST", url, token, path=f"{owner}/{repo}", payload=payload))
        logger.info(f"Created pull request {owner}/{repo}#{data.get('number')}")
        return CreatedPullRequest(number=data.get("number"), html_url=data.get("html_url"))

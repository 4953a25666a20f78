#!/usr/bin/env python3
"""
HTTP transport for the MediaWiki action API.

Sends one request, returns the parsed JSON body or raises a structured error:
- Rate-limited requests with a bounded HTTP retry loop
- API-level errors mapped to QueryError(code, info)
- Bot-password login (token fetch + action=login)
- Optional wire tracing at DEBUG level

Usage:
    from mwimport.wiki_api import WikiAPI

    api = WikiAPI(api_url="https://en.wikipedia.org/w/api.php")
    data = api.request({"action": "query", "meta": "siteinfo"})
"""

import logging
import time
from typing import Optional

import requests

from mwimport.errors import AuthError, QueryError

TRACE_BODY_LIMIT = 2000


class WikiAPI:
    """MediaWiki API client with rate limiting and retries."""

    def __init__(
        self,
        api_url: str,
        delay: float = 1.0,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_delay: float = 5.0,
        user_agent: Optional[str] = None,
        trace: bool = False,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the Wiki API client.

        Args:
            api_url: MediaWiki API endpoint (e.g., https://wiki.example.com/api.php)
            delay: Seconds to wait before each request (be polite)
            timeout: Request timeout in seconds
            max_retries: Attempts per request on HTTP failure (1 = no retry)
            retry_delay: Seconds to wait between retries
            user_agent: Custom user agent string
            trace: Log every request and response at DEBUG level
            logger: Logger instance (creates one if not provided)
        """
        self.api_url = api_url
        self.delay = delay
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay

        self.logger = logger or logging.getLogger("mwimport.wiki_api")

        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent or "mwimport/1.0 (MediaWiki page importer)",
            "Accept": "application/json",
        })
        if trace:
            self.session.hooks["response"].append(self._trace)

    def _trace(self, response: requests.Response, *args, **kwargs):
        request = response.request
        body = request.body
        if isinstance(body, bytes):
            body = body.decode("utf-8", errors="replace")
        self.logger.debug(f">>> {request.method} {request.url}" + (f"\n{body}" if body else ""))
        self.logger.debug(
            f"<<< {response.status_code} {response.reason}\n{response.text[:TRACE_BODY_LIMIT]}"
        )

    def request(
        self,
        params: dict,
        description: str = "API request",
        method: str = "GET",
    ) -> dict:
        """
        Make an API request with retries and rate limiting.

        Args:
            params: Query parameters for the API call (not modified)
            description: Human-readable description for logging
            method: "GET" or "POST"

        Returns:
            JSON response as dict

        Raises:
            QueryError: HTTP failure after all retries, or an API error response
        """
        params = {**params, "format": "json"}
        last_error = None

        for attempt in range(self.max_retries):
            try:
                if self.delay:
                    time.sleep(self.delay)  # Rate limiting
                if method == "POST":
                    response = self.session.post(self.api_url, data=params, timeout=self.timeout)
                else:
                    response = self.session.get(self.api_url, params=params, timeout=self.timeout)
                response.raise_for_status()
                data = response.json()
                break

            except requests.RequestException as e:
                last_error = e
                self.logger.warning(
                    f"Attempt {attempt + 1}/{self.max_retries} failed for {description}: {e}"
                )
                if attempt < self.max_retries - 1:
                    time.sleep(self.retry_delay)
        else:
            self.logger.error(f"FAILED after {self.max_retries} attempts: {description}")
            raise QueryError("http", str(last_error))

        if not isinstance(data, dict):
            raise QueryError("badresponse", f"unexpected response body for {description}")

        if "error" in data:
            error = data["error"]
            code = error.get("code", "unknown")
            info = error.get("info", "Unknown error")
            self.logger.error(f"API error for {description}: {code}: {info}")
            raise QueryError(code, info)

        for warning in data.get("warnings", {}).values():
            self.logger.warning(f"API warning for {description}: {warning}")

        return data

    def login(self, lgname: str, lgpassword: str):
        """
        Log in with a bot password.

        Fetches a login token, then posts action=login. Session cookies keep
        the login for later requests.

        Raises:
            AuthError: token fetch failed or the server did not answer Success
        """
        try:
            tokens = self.request(
                {"action": "query", "meta": "tokens", "type": "login"},
                "fetching login token",
            )
            token = tokens.get("query", {}).get("tokens", {}).get("logintoken")
            if not token:
                raise AuthError("notoken", "server returned no login token")

            data = self.request(
                {"action": "login", "lgname": lgname, "lgpassword": lgpassword, "lgtoken": token},
                f"logging in as {lgname}",
                method="POST",
            )
        except QueryError as e:
            raise AuthError(e.code, e.details) from e

        result = data.get("login", {})
        if result.get("result") != "Success":
            raise AuthError(result.get("result", "Failed"), result.get("reason", "login rejected"))

        self.logger.info(f"Logged in as {result.get('lgusername', lgname)}")

    def close(self):
        """Release the underlying HTTP connection pool."""
        self.session.close()

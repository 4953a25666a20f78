"""Authenticated connection shared by all requests of one page stream."""

import logging
from typing import Optional

from mwimport.config import ImporterConfig
from mwimport.wiki_api import WikiAPI

logger = logging.getLogger("mwimport.session")


class Session:
    """
    One connection to the remote API, logged in at most once.

    The WikiAPI transport is built from the config on first use unless one is
    passed in. Login only happens when both lgname and lgpassword are set;
    otherwise access is anonymous.
    """

    def __init__(self, config: ImporterConfig, api: Optional[WikiAPI] = None):
        self.config = config
        self._api = api
        self.authenticated = False

    @property
    def api(self) -> WikiAPI:
        if self._api is None:
            self._api = WikiAPI(
                api_url=self.config.api_url,
                delay=self.config.delay,
                timeout=self.config.timeout,
                max_retries=self.config.max_retries,
                retry_delay=self.config.retry_delay,
                user_agent=self.config.user_agent,
                trace=self.config.trace,
            )
        return self._api

    def ensure_authenticated(self):
        """
        Log in if credentials are configured and this has not happened yet.

        Raises:
            AuthError: the server rejected the login (not retried)
        """
        if self.authenticated:
            return

        if self.config.has_credentials:
            logger.debug(f"Logging in to {self.config.api_url} as {self.config.lgname}")
            self.api.login(self.config.lgname, self.config.lgpassword)
        else:
            logger.debug("No credentials configured; using anonymous access")

        self.authenticated = True

    def request(self, params: dict, description: str = "API request") -> dict:
        return self.api.request(params, description)

    def close(self):
        if self._api is not None:
            self._api.close()

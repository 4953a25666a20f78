"""
MediaWiki page importer.

Provides:
- PageStream: pull-based iterator over the pages of a query generator
- resolve / ImporterConfig: validated importer settings
- WikiAPI: MediaWiki API transport with rate limiting
- setup_logging: Logging configuration for console and file output
- MediaWikiError and subclasses: structured errors with server code/details
"""

from mwimport.config import DEFAULT_ARGS, GENERATORS, ImporterConfig, merge_args, resolve
from mwimport.errors import AuthError, ConfigError, InvalidGeneratorError, MediaWikiError, QueryError
from mwimport.logging_config import setup_logging, get_log_dir
from mwimport.page_stream import PageStream, StreamState
from mwimport.session import Session
from mwimport.wiki_api import WikiAPI

__all__ = [
    "DEFAULT_ARGS",
    "GENERATORS",
    "ImporterConfig",
    "merge_args",
    "resolve",
    "AuthError",
    "ConfigError",
    "InvalidGeneratorError",
    "MediaWikiError",
    "QueryError",
    "setup_logging",
    "get_log_dir",
    "PageStream",
    "StreamState",
    "Session",
    "WikiAPI",
]

#!/usr/bin/env python3
"""
Importer configuration.

Holds the generator whitelist and the default query arguments, and turns raw
settings (from a config file, the environment or the command line) into an
immutable ImporterConfig.

Usage:
    from mwimport.config import resolve

    config = resolve({
        "url": "https://en.wikipedia.org/w/api.php",
        "generate": "allpages",
        "args": {"gapprefix": "plato", "rvlimit": None},
    })
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from mwimport.errors import ConfigError, InvalidGeneratorError

# Only generators that enumerate pages
GENERATORS = frozenset({
    "alllinks",
    "allpages",
    "allredirects",
    "alltransclusions",
    "backlinks",
    "categorymembers",
    "embeddedin",
    "exturlusage",
    "imageusage",
    "iwbacklinks",
    "langbacklinks",
    "pageswithprop",
    "prefixsearch",
    "random",
    "recentchanges",
    "watchlist",
    "watchlistraw",
})

DEFAULT_GENERATOR = "allpages"

REVISION_PROPS = "ids|flags|timestamp|user|comment|size|content"

DEFAULT_ARGS = {
    "prop": "revisions",
    "rvprop": REVISION_PROPS,
    "rvlimit": "max",
    "gaplimit": 100,
    "gapfilterredir": "nonredirects",
}

ArgValue = Union[str, int]


def merge_args(
    defaults: Mapping[str, Any],
    override: Optional[Mapping[str, Any]] = None,
) -> dict:
    """
    Merge extra query arguments over a default map.

    The override wins key by key. A key whose merged value is None is removed
    from the result instead of being kept.

    Args:
        defaults: Base arguments
        override: Caller arguments (None = use defaults only)

    Returns:
        New dict; neither input is modified
    """
    merged = {**defaults, **(override or {})}
    return {key: value for key, value in merged.items() if value is not None}


@dataclass(frozen=True)
class ImporterConfig:
    """Resolved, validated importer settings."""

    api_url: str
    generator: str = DEFAULT_GENERATOR
    lgname: Optional[str] = None
    lgpassword: Optional[str] = field(default=None, repr=False)
    args: Mapping[str, ArgValue] = field(default_factory=lambda: MappingProxyType(dict(DEFAULT_ARGS)))
    user_agent: Optional[str] = None
    timeout: float = 30.0
    delay: float = 1.0
    max_retries: int = 3
    retry_delay: float = 5.0
    trace: bool = False

    @property
    def has_credentials(self) -> bool:
        """True when both login name and password are non-empty strings."""
        return _is_string(self.lgname) and _is_string(self.lgpassword)

    @property
    def rvlimit(self) -> Optional[str]:
        """History limit requested by the caller, or None when not set."""
        value = self.args.get("rvlimit")
        if value is None or str(value) == "":
            return None
        return str(value)


def _is_string(value) -> bool:
    return isinstance(value, str) and value != ""


def resolve(raw: Mapping[str, Any]) -> ImporterConfig:
    """
    Validate raw settings and build an ImporterConfig.

    Recognised keys: url, generate, lgname, lgpassword, args, user_agent,
    timeout, delay, max_retries, retry_delay, trace. Unknown keys are ignored.

    Raises:
        InvalidGeneratorError: generate is not in GENERATORS
        ConfigError: url missing or args not a mapping
    """
    url = raw.get("url")
    if not _is_string(url):
        raise ConfigError("url must be a non-empty string")

    generator = raw.get("generate")
    if generator is None:
        generator = DEFAULT_GENERATOR
    if not isinstance(generator, str) or generator not in GENERATORS:
        raise InvalidGeneratorError(generator)

    extra = raw.get("args")
    if extra is not None and not isinstance(extra, Mapping):
        raise ConfigError("args must be a mapping")

    transport = {
        key: raw[key]
        for key in ("user_agent", "timeout", "delay", "max_retries", "retry_delay")
        if raw.get(key) is not None
    }

    return ImporterConfig(
        api_url=url,
        generator=generator,
        lgname=raw.get("lgname"),
        lgpassword=raw.get("lgpassword"),
        args=MappingProxyType(merge_args(DEFAULT_ARGS, extra)),
        trace=bool(raw.get("trace")),
        **transport,
    )


def load_config_file(path: Union[str, Path]) -> dict:
    """
    Load raw settings from a JSON config file.

    Raises:
        ConfigError: file unreadable, not JSON, or not a JSON object
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a JSON object")
    return data


def env_overrides(environ: Optional[Mapping[str, str]] = None) -> dict:
    """
    Collect raw settings from MW_* environment variables.

    MW_API_URL, MW_GENERATOR, MW_LGNAME, MW_LGPASSWORD and MW_TRACE are read;
    unset or empty variables are skipped.
    """
    if environ is None:
        environ = os.environ

    mapping = {
        "MW_API_URL": "url",
        "MW_GENERATOR": "generate",
        "MW_LGNAME": "lgname",
        "MW_LGPASSWORD": "lgpassword",
        "MW_TRACE": "trace",
    }
    return {key: environ[var] for var, key in mapping.items() if environ.get(var)}

#!/usr/bin/env python3
"""
Pull-based iterator over the pages produced by a MediaWiki generator.

Each pull either returns a buffered page or refills the buffer with the next
batch from the server: one primary listing request driven by the generator
and its continuation token, plus one revisions request per page when full
history was asked for (the API rejects rvlimit on multi-page queries).

Usage:
    from mwimport.config import resolve
    from mwimport.page_stream import PageStream

    config = resolve({"url": "https://en.wikipedia.org/w/api.php"})
    with PageStream(config) as pages:
        for page in pages:
            print(page["title"])
"""

import enum
import logging
from collections import deque
from typing import Any, Dict, List, Optional, TypedDict

from mwimport.config import REVISION_PROPS, ImporterConfig
from mwimport.session import Session

logger = logging.getLogger("mwimport.page_stream")

# Sent with the first listing request; distinct from None (no more data)
INITIAL_CONTINUATION = {"continue": ""}


RevisionRecord = TypedDict("RevisionRecord", {
    "revid": int,
    "parentid": int,
    "minor": str,
    "timestamp": str,
    "user": str,
    "comment": str,
    "size": int,
    "*": str,
}, total=False)


class PageRecord(TypedDict, total=False):
    pageid: int
    ns: int
    title: str
    revisions: List[RevisionRecord]


class StreamState(enum.Enum):
    FRESH = "fresh"
    LISTING = "listing"
    BUFFERED = "buffered"
    EXHAUSTED = "exhausted"


class PageStream:
    """
    Iterator of page records for one generator query.

    The stream owns its buffer, its continuation token and its Session. It
    is single-threaded; a stream that raised QueryError or AuthError is in an
    undefined state and must not be reused.
    """

    def __init__(self, config: ImporterConfig, session: Optional[Session] = None):
        self.config = config
        self.session = session or Session(config)
        self.buffer = deque()
        self.continuation: Optional[Dict[str, str]] = dict(INITIAL_CONTINUATION)
        self.started = False
        self.fetched_batches = 0
        self.yielded = 0

    @property
    def state(self) -> StreamState:
        if self.buffer:
            return StreamState.BUFFERED
        if self.continuation is None:
            return StreamState.EXHAUSTED
        if not self.started:
            return StreamState.FRESH
        return StreamState.LISTING

    def __iter__(self):
        return self

    def __next__(self) -> PageRecord:
        page = self.next_page()
        if page is None:
            raise StopIteration
        return page

    def next_page(self) -> Optional[PageRecord]:
        """
        Return the next page record, or None once the stream is exhausted.

        Raises:
            AuthError: login rejected
            QueryError: a listing or revisions request failed
        """
        self.session.ensure_authenticated()

        while not self.buffer:
            if self.continuation is None:
                return None
            self._fetch_batch()

        self.yielded += 1
        return self.buffer.popleft()

    def listing_params(self) -> Dict[str, Any]:
        """Primary request for the current continuation token."""
        params = {key: value for key, value in self.config.args.items() if key != "rvlimit"}
        params.update(self.continuation or {})
        params.update({
            "action": "query",
            "indexpageids": 1,
            "generator": self.config.generator,
            "format": "json",
        })
        return params

    def revisions_params(self, pageid) -> Dict[str, Any]:
        """Secondary request for the full history of one page."""
        return {
            "action": "query",
            "format": "json",
            "pageids": pageid,
            "prop": "revisions",
            "rvprop": REVISION_PROPS,
            "rvlimit": self.config.rvlimit,
        }

    def _fetch_batch(self):
        self.started = True
        self.fetched_batches += 1

        data = self.session.request(
            self.listing_params(),
            f"listing batch {self.fetched_batches} ({self.config.generator})",
        )
        # An empty continue member ends the walk like an absent one
        self.continuation = data.get("continue") or None

        query = data.get("query", {})
        pages = query.get("pages", {})
        pageids = query.get("pageids", [])
        logger.debug(
            f"Batch {self.fetched_batches}: {len(pageids)} pages, "
            f"{'more to come' if self.continuation else 'last batch'}"
        )

        for pageid in pageids:
            page = pages.get(str(pageid), pages.get(pageid))
            if page is None:
                logger.warning(f"Page id {pageid} listed but missing from response")
                continue
            if self.config.rvlimit is not None:
                self._merge_history(pageid, page)
            self.buffer.append(page)

    def _merge_history(self, pageid, page: dict):
        data = self.session.request(
            self.revisions_params(pageid),
            f"fetching revisions of page {pageid}",
        )
        history = data.get("query", {}).get("pages", {}).get(str(pageid), {})
        revisions = history.get("revisions")
        if revisions:
            page["revisions"] = revisions

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

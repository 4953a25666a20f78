"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add project root to path for all tests
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from mwimport.config import resolve


def listing(pageids, cont=None, revisions=None):
    """Build a primary listing response for the given page ids."""
    pages = {
        str(pid): {
            "pageid": pid,
            "ns": 0,
            "title": f"Page {pid}",
            "revisions": revisions if revisions is not None else [{"revid": pid * 10, "*": "latest"}],
        }
        for pid in pageids
    }
    data = {"batchcomplete": "", "query": {"pageids": [str(pid) for pid in pageids], "pages": pages}}
    if pageids == []:
        data["query"] = {}
    if cont is not None:
        data["continue"] = cont
    return data


def history(pageid, revisions):
    """Build a secondary revisions response for one page."""
    page = {"pageid": pageid, "ns": 0, "title": f"Page {pageid}"}
    if revisions is not None:
        page["revisions"] = revisions
    return {"query": {"pages": {str(pageid): page}}}


@pytest.fixture
def temp_log_dir(tmp_path):
    """Provide a temporary directory for log files."""
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    return log_dir


@pytest.fixture
def make_config():
    """Build an ImporterConfig from keyword overrides."""
    def _make(**raw):
        raw.setdefault("url", "https://wiki.example.com/api.php")
        return resolve(raw)
    return _make


@pytest.fixture
def scripted_api():
    """A WikiAPI stand-in whose request() answers from a script."""
    def _make(*responses):
        api = Mock()
        api.request = Mock(side_effect=list(responses))
        api.login = Mock()
        return api
    return _make

"""Tests for WikiAPI transport."""

import sys
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import requests

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mwimport.errors import AuthError, QueryError
from mwimport.wiki_api import WikiAPI

URL = "https://wiki.example.com/api.php"


def json_response(data):
    response = Mock()
    response.json.return_value = data
    response.raise_for_status = Mock()
    return response


class TestWikiAPIInit:
    """Tests for WikiAPI initialization."""

    def test_default_initialization(self):
        """WikiAPI should initialize with sensible defaults."""
        api = WikiAPI(api_url=URL)
        assert api.api_url == URL
        assert api.delay == 1.0
        assert api.timeout == 30.0
        assert api.max_retries == 3

    def test_custom_parameters(self):
        """WikiAPI should accept custom parameters."""
        api = WikiAPI(api_url=URL, delay=5.0, timeout=60.0, max_retries=5, user_agent="CustomBot/1.0")
        assert api.delay == 5.0
        assert api.timeout == 60.0
        assert api.max_retries == 5
        assert api.session.headers["User-Agent"] == "CustomBot/1.0"

    def test_max_retries_at_least_one(self):
        """A non-positive retry count should still make one attempt."""
        assert WikiAPI(api_url=URL, max_retries=0).max_retries == 1

    def test_trace_hook_installed(self):
        """trace=True should register a response hook."""
        api = WikiAPI(api_url=URL, trace=True)
        assert api._trace in api.session.hooks["response"]
        assert WikiAPI(api_url=URL).session.hooks["response"] == []


class TestWikiAPIRequest:
    """Tests for WikiAPI.request method."""

    @patch('mwimport.wiki_api.time.sleep')
    def test_request_adds_format_json(self, mock_sleep):
        """Request should send format=json without modifying the caller's params."""
        api = WikiAPI(api_url=URL)
        api.session.get = Mock(return_value=json_response({"query": {}}))

        params = {"action": "query"}
        api.request(params)

        call_args = api.session.get.call_args
        assert call_args[1]["params"]["format"] == "json"
        assert params == {"action": "query"}

    @patch('mwimport.wiki_api.time.sleep')
    def test_request_returns_json(self, mock_sleep):
        """Request should return parsed JSON."""
        api = WikiAPI(api_url=URL)
        expected_data = {"query": {"pages": {}}}
        api.session.get = Mock(return_value=json_response(expected_data))

        assert api.request({"action": "query"}) == expected_data

    @patch('mwimport.wiki_api.time.sleep')
    def test_request_respects_delay(self, mock_sleep):
        """Request should sleep for the configured delay."""
        api = WikiAPI(api_url=URL, delay=3.0)
        api.session.get = Mock(return_value=json_response({}))

        api.request({"action": "query"})
        mock_sleep.assert_called_with(3.0)

    @patch('mwimport.wiki_api.time.sleep')
    def test_post_sends_form_data(self, mock_sleep):
        """POST requests should send params as form data."""
        api = WikiAPI(api_url=URL)
        api.session.post = Mock(return_value=json_response({}))

        api.request({"action": "login"}, method="POST")

        assert api.session.post.call_args[1]["data"] == {"action": "login", "format": "json"}

    @patch('mwimport.wiki_api.time.sleep')
    def test_retries_then_succeeds(self, mock_sleep):
        """A transient HTTP failure should be retried."""
        api = WikiAPI(api_url=URL, max_retries=3)
        api.session.get = Mock(side_effect=[requests.ConnectionError("reset"), json_response({"ok": 1})])

        assert api.request({"action": "query"}) == {"ok": 1}
        assert api.session.get.call_count == 2

    @patch('mwimport.wiki_api.time.sleep')
    def test_raises_after_all_retries(self, mock_sleep):
        """Persistent HTTP failure should raise QueryError with code http."""
        api = WikiAPI(api_url=URL, max_retries=2)
        api.session.get = Mock(side_effect=requests.RequestException("Network error"))

        with pytest.raises(QueryError) as excinfo:
            api.request({"action": "query"})

        assert excinfo.value.code == "http"
        assert "Network error" in excinfo.value.details
        assert api.session.get.call_count == 2

    @patch('mwimport.wiki_api.time.sleep')
    def test_api_error_raises(self, mock_sleep):
        """An API error member should raise QueryError without retrying."""
        api = WikiAPI(api_url=URL)
        api.session.get = Mock(return_value=json_response(
            {"error": {"code": "badvalue", "info": "Unrecognized value for parameter \"generator\""}}
        ))

        with pytest.raises(QueryError) as excinfo:
            api.request({"action": "query"})

        assert excinfo.value.code == "badvalue"
        assert api.session.get.call_count == 1

    @patch('mwimport.wiki_api.time.sleep')
    def test_non_object_body(self, mock_sleep):
        """A JSON body that is not an object should raise QueryError."""
        api = WikiAPI(api_url=URL)
        api.session.get = Mock(return_value=json_response([]))

        with pytest.raises(QueryError):
            api.request({"action": "query"})


class TestWikiAPILogin:
    """Tests for WikiAPI.login method."""

    @patch('mwimport.wiki_api.time.sleep')
    def test_successful_login(self, mock_sleep):
        """Login should fetch a token then post it with the credentials."""
        api = WikiAPI(api_url=URL)
        api.session.get = Mock(return_value=json_response(
            {"query": {"tokens": {"logintoken": "abc+\\"}}}
        ))
        api.session.post = Mock(return_value=json_response(
            {"login": {"result": "Success", "lgusername": "Bot"}}
        ))

        api.login("Bot@import", "secret")

        data = api.session.post.call_args[1]["data"]
        assert data["action"] == "login"
        assert data["lgname"] == "Bot@import"
        assert data["lgpassword"] == "secret"
        assert data["lgtoken"] == "abc+\\"

    @patch('mwimport.wiki_api.time.sleep')
    def test_rejected_login(self, mock_sleep):
        """A non-Success result should raise AuthError with result and reason."""
        api = WikiAPI(api_url=URL)
        api.session.get = Mock(return_value=json_response(
            {"query": {"tokens": {"logintoken": "abc+\\"}}}
        ))
        api.session.post = Mock(return_value=json_response(
            {"login": {"result": "Failed", "reason": "Incorrect username or password entered."}}
        ))

        with pytest.raises(AuthError) as excinfo:
            api.login("Bot@import", "wrong")

        assert excinfo.value.code == "Failed"
        assert "Incorrect" in excinfo.value.details

    @patch('mwimport.wiki_api.time.sleep')
    def test_transport_failure_during_login(self, mock_sleep):
        """HTTP failure during login should surface as AuthError."""
        api = WikiAPI(api_url=URL, max_retries=1)
        api.session.get = Mock(side_effect=requests.RequestException("down"))

        with pytest.raises(AuthError) as excinfo:
            api.login("Bot@import", "secret")

        assert excinfo.value.code == "http"

    @patch('mwimport.wiki_api.time.sleep')
    def test_missing_token(self, mock_sleep):
        """A response without a login token should raise AuthError."""
        api = WikiAPI(api_url=URL)
        api.session.get = Mock(return_value=json_response({"query": {}}))

        with pytest.raises(AuthError) as excinfo:
            api.login("Bot@import", "secret")

        assert excinfo.value.code == "notoken"

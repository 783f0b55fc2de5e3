"""Tests for action resolution and execution."""

from unittest.mock import MagicMock

import pytest
import requests

from ntfy_relay.actions import (
    DEFAULT_ACTION_IDENTIFIER,
    DISMISS_ACTION_IDENTIFIER,
    DefaultActionExecutor,
    LinkOpener,
    resolve_action,
)
from ntfy_relay.models import Action


@pytest.fixture
def actions():
    return [
        Action(id="a1", action="view", url="https://example.org/1"),
        Action(id="a2", action="http", url="https://example.org/2"),
    ]


class TestResolveAction:

    def test_matches_identifier(self, actions):
        assert resolve_action(actions, "a2") is actions[1]

    @pytest.mark.parametrize("identifier", [None, "", DEFAULT_ACTION_IDENTIFIER, DISMISS_ACTION_IDENTIFIER])
    def test_body_tap_returns_none(self, actions, identifier):
        assert resolve_action(actions, identifier) is None

    def test_unknown_identifier_returns_none(self, actions):
        assert resolve_action(actions, "a9") is None

    def test_no_actions(self):
        assert resolve_action(None, "a1") is None
        assert resolve_action([], "a1") is None

    def test_duplicates_prefer_first(self):
        first = Action(id="dup", action="view", url="https://one")
        second = Action(id="dup", action="view", url="https://two")
        assert resolve_action([first, second], "dup") is first


class TestDefaultActionExecutor:

    @pytest.fixture
    def opener(self):
        return MagicMock(spec=LinkOpener)

    @pytest.fixture
    def session(self):
        session = MagicMock(spec=requests.Session)
        session.request.return_value = MagicMock(status_code=200)
        return session

    def test_view_opens_url(self, opener, session):
        DefaultActionExecutor(opener, session).execute(Action(id="v", action="view", url="https://example.org"))
        opener.open.assert_called_once_with("https://example.org")
        session.request.assert_not_called()

    def test_http_sends_request(self, opener, session):
        action = Action(
            id="h", action="http", url="https://api.example.org/x",
            method="put", headers={"X-Test": "1"}, body="hello",
        )
        DefaultActionExecutor(opener, session, timeout=5).execute(action)
        session.request.assert_called_once_with(
            "PUT", "https://api.example.org/x",
            headers={"X-Test": "1"}, data=b"hello", timeout=5,
        )

    def test_http_defaults_to_post(self, opener, session):
        DefaultActionExecutor(opener, session).execute(Action(id="h", action="http", url="https://x.org"))
        assert session.request.call_args.args[0] == "POST"

    def test_http_failure_is_logged_not_raised(self, opener, session, caplog):
        session.request.side_effect = requests.ConnectionError("refused")
        DefaultActionExecutor(opener, session).execute(Action(id="h", action="http", url="https://x.org"))
        assert "HTTP action h failed" in caplog.text

    def test_broadcast_is_not_supported(self, opener, session, caplog):
        DefaultActionExecutor(opener, session).execute(Action(id="b", action="broadcast"))
        opener.open.assert_not_called()
        session.request.assert_not_called()
        assert "not supported" in caplog.text

    def test_view_opener_failure_is_logged(self, opener, session, caplog):
        opener.open.side_effect = RuntimeError("no browser")
        DefaultActionExecutor(opener, session).execute(Action(id="v", action="view", url="https://x.org"))
        assert "Failed to open" in caplog.text

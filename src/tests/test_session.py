from __future__ import annotations

from unittest.mock import patch

import pytest

from conftest import make_story, story_record, user_record
from snooze_tui.errors import AuthError, NotFoundError
from snooze_tui.session import Session
from snooze_tui.stories import StoryList
from snooze_tui.user import User


@pytest.fixture
def session(api):
    return Session(api)


def test_start_without_credentials(session, api):
    api.get.return_value = {"stories": [story_record("1")]}
    with patch("snooze_tui.session.load_credentials", return_value=None):
        session.start()
    assert session.user is None
    assert not session.is_authenticated
    assert [s.story_id for s in session.all_stories()] == ["1"]


def test_start_restores_stored_session(session, api):
    api.get.side_effect = [
        {"user": user_record(favorites=[story_record("1")])},
        {"stories": [story_record("1"), story_record("2")]},
    ]
    with patch(
        "snooze_tui.session.load_credentials",
        return_value={"username": "bob", "token": "stored"},
    ), patch("snooze_tui.session.clear_credentials") as mock_clear:
        session.start()
    assert session.user.username == "bob"
    assert session.user.token == "stored"
    mock_clear.assert_not_called()
    assert len(session.all_stories()) == 2


def test_start_with_expired_session_goes_anonymous(session, api):
    api.get.side_effect = [
        AuthError("Invalid token", 401),
        {"stories": [story_record("1")]},
    ]
    with patch(
        "snooze_tui.session.load_credentials",
        return_value={"username": "bob", "token": "expired"},
    ), patch("snooze_tui.session.clear_credentials") as mock_clear:
        session.start()
    assert session.user is None
    mock_clear.assert_called_once()
    assert len(session.all_stories()) == 1


def test_start_ignores_credentials_when_not_remembering(api):
    session = Session(api, remember_login=False)
    api.get.return_value = {"stories": []}
    with patch("snooze_tui.session.load_credentials") as mock_load:
        session.start()
    mock_load.assert_not_called()
    api.get.assert_called_once_with("/stories")


def test_login_saves_credentials(session, api):
    api.post.return_value = {"token": "fresh", "user": user_record()}
    with patch("snooze_tui.session.save_credentials") as mock_save:
        user = session.login("bob", "secret")
    assert session.user is user
    mock_save.assert_called_once_with("bob", "fresh")


def test_failed_login_propagates_and_stays_anonymous(session, api):
    api.post.side_effect = AuthError("Invalid password", 401)
    with patch("snooze_tui.session.save_credentials") as mock_save:
        with pytest.raises(AuthError):
            session.login("bob", "wrong")
    assert session.user is None
    mock_save.assert_not_called()


def test_signup_saves_credentials(session, api):
    api.post.return_value = {"token": "new", "user": user_record()}
    with patch("snooze_tui.session.save_credentials") as mock_save:
        session.signup("bob", "secret", "Bob")
    assert session.is_authenticated
    mock_save.assert_called_once_with("bob", "new")


def test_logout(session, api):
    session.user = User(api, "bob", "Bob", "tok")
    with patch("snooze_tui.session.clear_credentials") as mock_clear:
        session.logout()
    assert session.user is None
    assert session.favorites() == []
    assert session.own_stories() == []
    mock_clear.assert_called_once()


def test_operations_require_login(session):
    with pytest.raises(AuthError):
        session.submit_story("T", "Au", "http://x.com")
    with pytest.raises(AuthError):
        session.delete_story("1")
    with pytest.raises(AuthError):
        session.toggle_favorite("1")


def test_submit_and_delete_story(session, api, user):
    session.user = user
    session.story_list = StoryList(api, [make_story("1")])
    api.post.return_value = {"story": story_record("9")}

    story = session.submit_story("T", "Au", "http://x.com")
    assert [s.story_id for s in session.all_stories()] == ["1", "9"]
    assert session.own_stories() == [story]

    session.delete_story("9")
    assert [s.story_id for s in session.all_stories()] == ["1"]
    assert session.own_stories() == []


def test_toggle_favorite_finds_story_in_favorites(session, api, user):
    # a favorite that is no longer in the fetched list can still be unstarred
    session.user = user
    session.story_list = StoryList(api, [])
    user.favorites = [make_story("4")]
    api.delete.return_value = {"user": user_record(favorites=[])}

    assert session.toggle_favorite("4") == []
    api.delete.assert_called_once_with("/users/bob/favorites/4", {"token": "tok-123"})


def test_toggle_favorite_unknown_story(session, api, user):
    session.user = user
    session.story_list = StoryList(api, [make_story("1")])
    with pytest.raises(NotFoundError):
        session.toggle_favorite("404")
    api.post.assert_not_called()

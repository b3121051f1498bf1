"""Tests for the User aggregate: registration, login stamping, blocking and roles."""

import pytest
from identity.user.events import (
    UserBlocked,
    UserLoggedIn,
    UserProfileUpdated,
    UserRegistered,
    UserRoleChanged,
    UserUnblocked,
)
from identity.user.passwords import hash_password
from identity.user.user import User, UserRole, normalize_username
from protean.exceptions import ValidationError


def _make_user(**overrides):
    fields = {
        "username": "Alice",
        "email": "Alice@Example.com",
        "password_hash": hash_password("wonderland"),
    }
    fields.update(overrides)
    return User.register(**fields)


class TestRegister:
    def test_username_and_email_are_normalized(self):
        user = _make_user()
        assert user.username == "alice"
        assert user.email == "alice@example.com"

    def test_defaults(self):
        user = _make_user()
        assert user.role == UserRole.USER.value
        assert user.blocked is False
        assert user.name == "alice"
        assert user.created_at is not None

    def test_raises_registered_event(self):
        user = _make_user()
        assert len(user._events) == 1
        event = user._events[0]
        assert isinstance(event, UserRegistered)
        assert event.user_id == str(user.id)
        assert event.username == "alice"

    def test_blank_username_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _make_user(username="   ")
        assert "username" in exc.value.messages

    @pytest.mark.parametrize("email", ["no-at-sign", "a@b", "a@@b.com", "a @b.com", "a@.com"])
    def test_invalid_email_rejected(self, email):
        with pytest.raises(ValidationError) as exc:
            _make_user(email=email)
        assert "email" in exc.value.messages

    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError):
            _make_user(role="superuser")

    def test_normalize_username(self):
        assert normalize_username("  Bob ") == "bob"
        assert normalize_username(None) == ""


class TestCredentials:
    def test_verify_password(self):
        user = _make_user()
        assert user.verify_password("wonderland")
        assert not user.verify_password("looking-glass")

    def test_record_login_stamps_time(self):
        user = _make_user()
        user._events.clear()

        user.record_login()
        assert user.last_login_at is not None
        assert isinstance(user._events[0], UserLoggedIn)

    def test_blocked_user_cannot_log_in(self):
        user = _make_user()
        user.block()
        with pytest.raises(ValidationError):
            user.record_login()


class TestBlocking:
    def test_block(self):
        user = _make_user()
        user._events.clear()

        user.block()
        assert user.blocked is True
        assert isinstance(user._events[0], UserBlocked)

    def test_cannot_block_twice(self):
        user = _make_user()
        user.block()
        with pytest.raises(ValidationError) as exc:
            user.block()
        assert "already blocked" in str(exc.value)

    def test_unblock(self):
        user = _make_user()
        user.block()
        user._events.clear()

        user.unblock()
        assert user.blocked is False
        assert isinstance(user._events[0], UserUnblocked)

    def test_cannot_unblock_active_user(self):
        user = _make_user()
        with pytest.raises(ValidationError):
            user.unblock()


class TestRoles:
    def test_toggle_promotes_user(self):
        user = _make_user()
        user._events.clear()

        user.toggle_role()
        assert user.role == UserRole.ADMIN.value
        assert user.is_admin
        event = user._events[0]
        assert isinstance(event, UserRoleChanged)
        assert event.previous_role == "user"
        assert event.new_role == "admin"

    def test_toggle_demotes_admin(self):
        user = _make_user(role=UserRole.ADMIN.value)
        user.toggle_role()
        assert user.role == UserRole.USER.value


class TestPublicDict:
    def test_never_exposes_password_hash(self):
        data = _make_user().to_public_dict()
        assert "password_hash" not in data
        assert data["username"] == "alice"
        assert data["blocked"] is False


class TestUpdateProfile:
    def test_changes_name_and_email(self):
        user = _make_user()
        user._events.clear()

        assert user.update_profile(name="Alice Liddell", email="Alice@Wonderland.org") is True
        assert user.name == "Alice Liddell"
        assert user.email == "alice@wonderland.org"

        event = user._events[-1]
        assert isinstance(event, UserProfileUpdated)
        assert event.email == "alice@wonderland.org"

    def test_unchanged_values_raise_no_event(self):
        user = _make_user()
        user._events.clear()

        assert user.update_profile(name="alice", email="ALICE@example.com") is False
        assert user._events == []

    def test_fields_left_out_are_kept(self):
        user = _make_user()
        user.update_profile(name="Al")
        assert user.email == "alice@example.com"

    def test_invalid_email_rejected(self):
        user = _make_user()
        with pytest.raises(ValidationError) as exc:
            user.update_profile(email="not-an-email")
        assert "email" in exc.value.messages
        assert user.email == "alice@example.com"

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            _make_user().update_profile(name="   ")

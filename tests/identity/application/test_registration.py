"""Tests for user registration through the domain."""

import pytest
from identity.user.registration import register_user
from identity.user.user import User
from protean import current_domain
from protean.exceptions import ValidationError


class TestRegisterUser:
    def test_register_persists_user(self):
        user_id = register_user(username="carol", email="carol@example.com", password="secret-pw")

        user = current_domain.repository_for(User).get(user_id)
        assert user.username == "carol"
        assert user.password_hash != "secret-pw"
        assert user.verify_password("secret-pw")

    def test_duplicate_username_rejected(self):
        register_user(username="carol", email="carol@example.com", password="secret-pw")
        with pytest.raises(ValidationError) as exc:
            register_user(username="Carol", email="other@example.com", password="secret-pw")
        assert "already taken" in str(exc.value)

    def test_duplicate_email_rejected(self):
        register_user(username="carol", email="carol@example.com", password="secret-pw")
        with pytest.raises(ValidationError) as exc:
            register_user(username="caroline", email="CAROL@example.com", password="secret-pw")
        assert "email" in exc.value.messages

    def test_weak_password_rejected_before_hashing(self):
        with pytest.raises(ValidationError) as exc:
            register_user(username="carol", email="carol@example.com", password="123")
        assert "password" in exc.value.messages

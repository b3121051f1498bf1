"""User aggregate — a storefront account with credentials and a role.

Users log in with a username and password and receive a session token. An
administrator can block an account (logins are refused) or toggle its role
between ``user`` and ``admin``. Owners can edit their display name and email.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String

from identity.domain import identity
from identity.shared.email import normalize_email
from identity.user.events import (
    UserBlocked,
    UserLoggedIn,
    UserProfileUpdated,
    UserRegistered,
    UserRoleChanged,
    UserUnblocked,
)
from identity.user.passwords import check_password


class UserRole(Enum):
    USER = "user"
    ADMIN = "admin"


def normalize_username(username):
    return (username or "").strip().lower()


@identity.aggregate
class User:
    username = String(required=True, max_length=50, unique=True)
    email = String(required=True, max_length=254, unique=True)
    name = String(max_length=100)
    password_hash = String(required=True, max_length=100)
    role = String(choices=UserRole, default=UserRole.USER.value)
    blocked = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()
    last_login_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def register(cls, username, email, password_hash, name=None, role=UserRole.USER.value):
        username = normalize_username(username)
        if not username:
            raise ValidationError({"username": ["Username is required"]})

        email = normalize_email(email)
        if role not in {r.value for r in UserRole}:
            raise ValidationError({"role": [f"Unknown role {role!r}"]})

        now = datetime.now(UTC)
        user = cls(
            username=username,
            email=email,
            name=name or username,
            password_hash=password_hash,
            role=role,
            blocked=False,
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                username=user.username,
                email=user.email,
                role=user.role,
                registered_at=now,
            )
        )
        return user

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN.value

    # -------------------------------------------------------------------
    # Credentials
    # -------------------------------------------------------------------
    def verify_password(self, password):
        return check_password(password, self.password_hash)

    def record_login(self):
        """Stamp a successful login. Blocked accounts cannot log in."""
        if self.blocked:
            raise ValidationError({"user": ["Account is blocked"]})

        now = datetime.now(UTC)
        self.last_login_at = now
        self.raise_(UserLoggedIn(user_id=str(self.id), logged_in_at=now))

    # -------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------
    def update_profile(self, name=None, email=None):
        """Change the display name and/or email. Fields left as None are kept."""
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError({"name": ["Name cannot be blank"]})
        if email is not None:
            email = normalize_email(email)

        changed = {}
        if name is not None and name != self.name:
            changed["name"] = name
        if email is not None and email != self.email:
            changed["email"] = email
        if not changed:
            return False

        now = datetime.now(UTC)
        for field, value in changed.items():
            setattr(self, field, value)
        self.updated_at = now
        self.raise_(UserProfileUpdated(user_id=str(self.id), name=self.name, email=self.email, updated_at=now))
        return True

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def block(self):
        if self.blocked:
            raise ValidationError({"blocked": ["User is already blocked"]})

        now = datetime.now(UTC)
        self.blocked = True
        self.updated_at = now
        self.raise_(UserBlocked(user_id=str(self.id), blocked_at=now))

    def unblock(self):
        if not self.blocked:
            raise ValidationError({"blocked": ["User is not blocked"]})

        now = datetime.now(UTC)
        self.blocked = False
        self.updated_at = now
        self.raise_(UserUnblocked(user_id=str(self.id), unblocked_at=now))

    def toggle_role(self):
        previous = self.role
        self.role = UserRole.USER.value if self.is_admin else UserRole.ADMIN.value
        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            UserRoleChanged(
                user_id=str(self.id),
                previous_role=previous,
                new_role=self.role,
                changed_at=now,
            )
        )

    def to_profile_dict(self):
        """The account as its owner sees it."""
        return {
            "id": str(self.id),
            "username": self.username,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def to_public_dict(self):
        """The account as the admin back-office sees it (no credentials)."""
        return {
            "id": str(self.id),
            "username": self.username,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "blocked": bool(self.blocked),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "last_login_at": self.last_login_at.isoformat() if self.last_login_at else None,
        }

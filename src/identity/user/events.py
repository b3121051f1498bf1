"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from identity.domain import identity


@identity.event(part_of="User")
class UserRegistered:
    """A new storefront account was created."""

    __version__ = 1

    user_id = Identifier(required=True)
    username = String(required=True)
    email = String(required=True)
    role = String(required=True)
    registered_at = DateTime(required=True)


@identity.event(part_of="User")
class UserLoggedIn:
    __version__ = 1

    user_id = Identifier(required=True)
    logged_in_at = DateTime(required=True)


@identity.event(part_of="User")
class UserBlocked:
    """An administrator blocked the account; logins are refused until unblocked."""

    __version__ = 1

    user_id = Identifier(required=True)
    blocked_at = DateTime(required=True)


@identity.event(part_of="User")
class UserUnblocked:
    __version__ = 1

    user_id = Identifier(required=True)
    unblocked_at = DateTime(required=True)


@identity.event(part_of="User")
class UserRoleChanged:
    __version__ = 1

    user_id = Identifier(required=True)
    previous_role = String(required=True)
    new_role = String(required=True)
    changed_at = DateTime(required=True)


@identity.event(part_of="User")
class UserProfileUpdated:
    """The account owner changed their display name or email."""

    __version__ = 1

    user_id = Identifier(required=True)
    name = String()
    email = String(required=True)
    updated_at = DateTime(required=True)

"""Login — verify credentials and stamp the login on the account.

Login is not modelled as a command: commands are persisted, and a plain-text
password must never be. A failed login never says whether the username or
the password was wrong.
"""

import structlog
from protean.utils.globals import current_domain

from identity.user.user import User, normalize_username

logger = structlog.get_logger(__name__)


class InvalidCredentials(Exception):
    pass


class AccountBlocked(Exception):
    pass


def find_by_username(username):
    matches = current_domain.repository_for(User)._dao.query.filter(username=normalize_username(username)).all().items
    return matches[0] if matches else None


def authenticate(username, password):
    """Return the logged-in user's claims as a dict, or raise."""
    user = find_by_username(username)
    if user is None or not user.verify_password(password):
        logger.info("auth.login_failed", username=normalize_username(username))
        raise InvalidCredentials("Invalid credentials")

    if user.blocked:
        logger.info("auth.login_blocked", user_id=str(user.id))
        raise AccountBlocked("Account is blocked")

    user.record_login()
    current_domain.repository_for(User).add(user)
    logger.info("auth.login_succeeded", user_id=str(user.id))

    return {"user_id": str(user.id), "username": user.username, "role": user.role}

"""User registration — command, handler and the entry point that hashes the password."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.user.passwords import hash_password, validate_password
from identity.user.user import User, UserRole, normalize_username


@identity.command(part_of="User")
class RegisterUser:
    username = String(required=True, max_length=50)
    email = String(required=True, max_length=254)
    password_hash = String(required=True, max_length=100)
    name = String(max_length=100)
    role = String(max_length=10, default=UserRole.USER.value)


@identity.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)

        username = normalize_username(command.username)
        if repo._dao.query.filter(username=username).all().items:
            raise ValidationError({"username": ["Username is already taken"]})

        email = command.email.strip().lower()
        if repo._dao.query.filter(email=email).all().items:
            raise ValidationError({"email": ["An account with this email already exists"]})

        user = User.register(
            username=username,
            email=email,
            password_hash=command.password_hash,
            name=command.name,
            role=command.role or UserRole.USER.value,
        )
        repo.add(user)
        return str(user.id)


def register_user(username, email, password, name=None, role=UserRole.USER.value):
    """Apply the password policy, hash, and register. Returns the new user id."""
    validate_password(password)
    return current_domain.process(
        RegisterUser(
            username=username,
            email=email,
            password_hash=hash_password(password),
            name=name,
            role=role,
        ),
        asynchronous=False,
    )

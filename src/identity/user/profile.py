"""Self-service profile — the signed-in user reads and edits their own account."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from identity.domain import identity, logger
from identity.shared.email import normalize_email
from identity.user.user import User


@identity.command(part_of="User")
class UpdateProfile:
    user_id = Identifier(required=True)
    name = String(max_length=100)
    email = String(max_length=254)


@identity.command_handler(part_of=User)
class UpdateProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        if command.email is not None:
            email = normalize_email(command.email)
            taken = repo._dao.query.filter(email=email).all().items
            if any(str(other.id) != str(user.id) for other in taken):
                raise ValidationError({"email": ["An account with this email already exists"]})

        if user.update_profile(name=command.name, email=command.email):
            repo.add(user)
            logger.info("user.profile_updated", user_id=str(user.id))
        return user.to_profile_dict()

"""Admin account management — block, unblock and role changes."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from identity.domain import identity
from identity.user.user import User


@identity.command(part_of="User")
class BlockUser:
    user_id = Identifier(required=True)


@identity.command(part_of="User")
class UnblockUser:
    user_id = Identifier(required=True)


@identity.command(part_of="User")
class ToggleUserRole:
    user_id = Identifier(required=True)


@identity.command_handler(part_of=User)
class UserAdministrationHandler:
    @handle(BlockUser)
    def block_user(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.block()
        repo.add(user)

    @handle(UnblockUser)
    def unblock_user(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.unblock()
        repo.add(user)

    @handle(ToggleUserRole)
    def toggle_user_role(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.toggle_role()
        repo.add(user)
        return user.role

"""Profile updates: command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.account.user import User
from storefront.domain import storefront


@storefront.command(part_of="User")
class UpdateProfile:
    """Change any of username, contact and gender. Omitted fields stay as they are."""

    user_id: Identifier(required=True)
    username: String(max_length=30)
    contact: String(max_length=15)
    gender: String(max_length=10)


@storefront.command_handler(part_of=User)
class UpdateProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        repo.ensure_available(
            username=command.username,
            contact=command.contact,
            exclude_id=user.id,
        )
        user.update_profile(
            username=command.username,
            contact=command.contact,
            gender=command.gender,
        )
        repo.add(user)

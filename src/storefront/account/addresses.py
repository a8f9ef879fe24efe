"""Address book management: commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.account.user import User
from storefront.domain import storefront


@storefront.command(part_of="User")
class AddAddress:
    user_id: Identifier(required=True)
    full_name: String(required=True, max_length=100)
    phone: String(required=True, max_length=15)
    address_line1: String(required=True, max_length=255)
    address_line2: String(max_length=255)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    pincode: String(required=True, max_length=10)
    country: String(max_length=100)
    is_default: Boolean(default=False)


@storefront.command(part_of="User")
class UpdateAddress:
    """Modify fields of an existing address. Omitted fields stay as they are."""

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    full_name: String(max_length=100)
    phone: String(max_length=15)
    address_line1: String(max_length=255)
    address_line2: String(max_length=255)
    city: String(max_length=100)
    state: String(max_length=100)
    pincode: String(max_length=10)
    country: String(max_length=100)
    is_default: Boolean()


@storefront.command(part_of="User")
class RemoveAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@storefront.command(part_of="User")
class SetDefaultAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


_EDITABLE = (
    "full_name",
    "phone",
    "address_line1",
    "address_line2",
    "city",
    "state",
    "pincode",
    "country",
)


@storefront.command_handler(part_of=User)
class ManageAddressesHandler:
    @handle(AddAddress)
    def add_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        fields = {name: getattr(command, name) for name in _EDITABLE if getattr(command, name) is not None}
        address = user.add_address(is_default=bool(command.is_default), **fields)
        repo.add(user)
        return str(address.id)

    @handle(UpdateAddress)
    def update_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        fields = {name: getattr(command, name) for name in _EDITABLE}
        user.update_address(command.address_id, is_default=command.is_default, **fields)
        repo.add(user)

    @handle(RemoveAddress)
    def remove_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.remove_address(command.address_id)
        repo.add(user)

    @handle(SetDefaultAddress)
    def set_default_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.set_default_address(command.address_id)
        repo.add(user)

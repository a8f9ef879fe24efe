"""Domain events for the User aggregate."""

from protean.fields import Boolean, DateTime, Identifier, List, String

from storefront.domain import storefront


@storefront.event(part_of="User")
class UserRegistered:
    """A new account was created and awaits email verification."""

    __version__ = 1

    user_id = Identifier(required=True)
    username = String(required=True)
    email = String(required=True)
    registered_at = DateTime(required=True)


@storefront.event(part_of="User")
class EmailVerified:
    """The account owner proved control of the email address."""

    __version__ = 1

    user_id = Identifier(required=True)
    email = String(required=True)
    verified_at = DateTime(required=True)


@storefront.event(part_of="User")
class PasswordChanged:
    __version__ = 1

    user_id = Identifier(required=True)
    changed_at = DateTime(required=True)


@storefront.event(part_of="User")
class ProfileUpdated:
    __version__ = 1

    user_id = Identifier(required=True)
    username = String()
    contact = String()
    gender = String()


@storefront.event(part_of="User")
class AddressAdded:
    __version__ = 1

    user_id = Identifier(required=True)
    address_id = Identifier(required=True)
    is_default = Boolean(default=False)


@storefront.event(part_of="User")
class AddressUpdated:
    __version__ = 1

    user_id = Identifier(required=True)
    address_id = Identifier(required=True)
    changed_fields = List(content_type=String)
    is_default = Boolean(default=False)


@storefront.event(part_of="User")
class AddressRemoved:
    __version__ = 1

    user_id = Identifier(required=True)
    address_id = Identifier(required=True)


@storefront.event(part_of="User")
class DefaultAddressChanged:
    __version__ = 1

    user_id = Identifier(required=True)
    address_id = Identifier(required=True)

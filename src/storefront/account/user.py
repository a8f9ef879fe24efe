"""User aggregate root with the Address entity."""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, DateTime, HasMany, String

from storefront.domain import storefront

_EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")
_CONTACT_RE = re.compile(r"^[0-9]{10,15}$")
_PINCODE_RE = re.compile(r"^[0-9A-Za-z -]{3,10}$")

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()

_ADDRESS_FIELDS = (
    "full_name",
    "phone",
    "address_line1",
    "address_line2",
    "city",
    "state",
    "pincode",
    "country",
)


class Gender(Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Role(Enum):
    USER = "user"
    ADMIN = "admin"


@storefront.entity(part_of="User")
class Address:
    """A delivery address in a user's address book.

    Orders copy these fields at placement time, so later edits never reach
    an order that was already placed.
    """

    full_name: String(required=True, max_length=100)
    phone: String(required=True, max_length=15)
    address_line1: String(required=True, max_length=255)
    address_line2: String(max_length=255)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    pincode: String(required=True, max_length=10)
    country: String(max_length=100, default="India")
    is_default: Boolean(default=False)

    @invariant.post
    def pincode_must_be_well_formed(self):
        if self.pincode and not _PINCODE_RE.match(self.pincode):
            raise ValidationError({"pincode": ["Please provide a valid pincode"]})

    def snapshot(self) -> dict:
        return {name: getattr(self, name) for name in _ADDRESS_FIELDS}


@storefront.aggregate
class User:
    """A shopper (or an administrator) with credentials and an address book.

    The password is only ever held as a bcrypt hash. An account stays
    unverified until its owner redeems an email verification code.
    """

    username: String(required=True, max_length=30, unique=True)
    email: String(required=True, max_length=254, unique=True)
    password_hash: String(required=True, max_length=128)
    contact: String(required=True, max_length=15, unique=True)
    gender: String(required=True, choices=Gender)
    role: String(choices=Role, default=Role.USER.value)
    is_email_verified: Boolean(default=False)
    is_active: Boolean(default=True)
    addresses: HasMany(Address)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def username_must_be_long_enough(self):
        if self.username is not None and len(self.username.strip()) < 3:
            raise ValidationError({"username": ["Username must be at least 3 characters"]})

    @invariant.post
    def email_must_be_valid(self):
        if self.email is not None and not _EMAIL_RE.match(self.email):
            raise ValidationError({"email": ["Please provide a valid email"]})

    @invariant.post
    def contact_must_be_valid(self):
        if self.contact is not None and not _CONTACT_RE.match(self.contact):
            raise ValidationError({"contact": ["Please provide a valid contact number (10-15 digits)"]})

    @invariant.post
    def exactly_one_default_address_when_addresses_exist(self):
        if not self.addresses:
            return
        defaults = [a for a in self.addresses if a.is_default]
        if len(defaults) != 1:
            raise ValidationError({"addresses": ["Exactly one address must be marked as default"]})

    @classmethod
    def register(cls, username, email, password_hash, contact, gender, role=Role.USER.value):
        from storefront.account.events import UserRegistered

        now = datetime.now(UTC)
        user = cls(
            username=username.strip(),
            email=email.strip().lower(),
            password_hash=password_hash,
            contact=contact,
            gender=gender,
            role=role,
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                username=user.username,
                email=user.email,
                registered_at=now,
            )
        )
        return user

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def verify_email(self):
        from storefront.account.events import EmailVerified

        if self.is_email_verified:
            return

        self.is_email_verified = True
        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(EmailVerified(user_id=self.id, email=self.email, verified_at=now))

    def change_password(self, password_hash):
        from storefront.account.events import PasswordChanged

        self.password_hash = password_hash
        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(PasswordChanged(user_id=self.id, changed_at=now))

    def deactivate(self):
        self.is_active = False
        self.updated_at = datetime.now(UTC)

    def update_profile(self, username=_UNSET, contact=_UNSET, gender=_UNSET):
        from storefront.account.events import ProfileUpdated

        with atomic_change(self):
            if username is not _UNSET and username is not None:
                self.username = username.strip()
            if contact is not _UNSET and contact is not None:
                self.contact = contact
            if gender is not _UNSET and gender is not None:
                self.gender = gender
            self.updated_at = datetime.now(UTC)

        self.raise_(
            ProfileUpdated(
                user_id=self.id,
                username=self.username,
                contact=self.contact,
                gender=self.gender,
            )
        )

    # -------------------------------------------------------------------
    # Address book
    # -------------------------------------------------------------------
    def find_address(self, address_id) -> Address:
        address = next((a for a in self.addresses if str(a.id) == str(address_id)), None)
        if address is None:
            raise ObjectNotFoundError("Address not found")
        return address

    def add_address(self, is_default=False, **fields):
        from storefront.account.events import AddressAdded

        # First address is always default
        if not self.addresses:
            is_default = True

        with atomic_change(self):
            if is_default:
                for addr in self.addresses:
                    if addr.is_default:
                        addr.is_default = False

            address = Address(is_default=is_default, **fields)
            self.add_addresses(address)

        self.raise_(AddressAdded(user_id=self.id, address_id=address.id, is_default=is_default))
        return address

    def update_address(self, address_id, **fields):
        """Overwrite the given non-empty fields. ``is_default=True`` also makes it the default."""
        from storefront.account.events import AddressUpdated

        address = self.find_address(address_id)
        is_default = fields.pop("is_default", None)
        changed = sorted(name for name, value in fields.items() if name in _ADDRESS_FIELDS and value is not None)

        with atomic_change(self):
            for name in changed:
                setattr(address, name, fields[name])
            if is_default:
                for addr in self.addresses:
                    addr.is_default = addr is address

        self.raise_(
            AddressUpdated(
                user_id=self.id,
                address_id=address.id,
                changed_fields=changed,
                is_default=address.is_default,
            )
        )
        return address

    def remove_address(self, address_id):
        from storefront.account.events import AddressRemoved

        address = self.find_address(address_id)
        was_default = address.is_default

        with atomic_change(self):
            self.remove_addresses(address)

            # Promote the first remaining address when the default goes away
            if was_default and self.addresses:
                self.addresses[0].is_default = True

        self.raise_(AddressRemoved(user_id=self.id, address_id=address_id))

    def set_default_address(self, address_id):
        from storefront.account.events import DefaultAddressChanged

        address = self.find_address(address_id)

        with atomic_change(self):
            for addr in self.addresses:
                if addr.is_default:
                    addr.is_default = False
            address.is_default = True

        self.raise_(DefaultAddressChanged(user_id=self.id, address_id=address_id))


@storefront.repository(part_of=User)
class UserRepository:
    """Lookups by the natural keys a user can be found by."""

    def find_by_email(self, email: str) -> User | None:
        if not email:
            return None
        return self._dao.query.filter(email=email.strip().lower()).all().first

    def find_by_username(self, username: str) -> User | None:
        return self._dao.query.filter(username=username.strip()).all().first

    def find_by_contact(self, contact: str) -> User | None:
        return self._dao.query.filter(contact=contact).all().first

    def ensure_available(self, username=None, email=None, contact=None, exclude_id=None):
        """Raise when another user already holds one of the given identifiers."""
        checks = (
            ("email", email, self.find_by_email, "Email already registered"),
            ("username", username, self.find_by_username, "Username already taken"),
            ("contact", contact, self.find_by_contact, "Contact number already registered"),
        )
        for field_name, value, finder, message in checks:
            if value is None:
                continue
            holder = finder(value)
            if holder is not None and str(holder.id) != str(exclude_id):
                raise ValidationError({field_name: [message]})

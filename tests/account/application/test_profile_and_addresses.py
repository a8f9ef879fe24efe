"""Application tests for profile updates and address book commands."""

import pytest
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.account.addresses import AddAddress, RemoveAddress, SetDefaultAddress, UpdateAddress
from storefront.account.profile import UpdateProfile
from storefront.account.user import User


def _reload(user):
    return current_domain.repository_for(User).get(user.id)


class TestUpdateProfile:
    def test_updates_given_fields(self, user):
        current_domain.process(UpdateProfile(user_id=user.id, username="asha_r", gender="other"), asynchronous=False)

        refreshed = _reload(user)
        assert refreshed.username == "asha_r"
        assert refreshed.gender == "other"
        assert refreshed.contact == user.contact

    def test_username_taken_by_someone_else(self, make_user):
        first = make_user()
        second = make_user()

        with pytest.raises(ValidationError) as exc:
            current_domain.process(UpdateProfile(user_id=second.id, username=first.username), asynchronous=False)
        assert exc.value.messages == {"username": ["Username already taken"]}

    def test_keeping_own_username_is_allowed(self, user):
        current_domain.process(UpdateProfile(user_id=user.id, username=user.username), asynchronous=False)
        assert _reload(user).username == user.username


class TestAddressCommands:
    def test_add_address_returns_its_id(self, make_user, address_fields):
        user = make_user(with_address=False)

        address_id = current_domain.process(AddAddress(user_id=user.id, **address_fields), asynchronous=False)

        refreshed = _reload(user)
        assert refreshed.find_address(address_id).is_default is True

    def test_add_default_address_moves_the_default(self, user, address_fields):
        original = user.addresses[0]
        address_id = current_domain.process(
            AddAddress(user_id=user.id, is_default=True, **{**address_fields, "city": "Pune"}),
            asynchronous=False,
        )

        refreshed = _reload(user)
        assert refreshed.find_address(address_id).is_default is True
        assert refreshed.find_address(original.id).is_default is False

    def test_update_address(self, user):
        address = user.addresses[0]
        current_domain.process(UpdateAddress(user_id=user.id, address_id=address.id, city="Chennai"), asynchronous=False)

        refreshed = _reload(user).find_address(address.id)
        assert refreshed.city == "Chennai"
        assert refreshed.full_name == address.full_name

    def test_set_default_address(self, user, address_fields):
        second_id = current_domain.process(
            AddAddress(user_id=user.id, **{**address_fields, "city": "Pune"}), asynchronous=False
        )

        current_domain.process(SetDefaultAddress(user_id=user.id, address_id=second_id), asynchronous=False)

        defaults = [a for a in _reload(user).addresses if a.is_default]
        assert [str(a.id) for a in defaults] == [str(second_id)]

    def test_remove_address(self, user):
        current_domain.process(RemoveAddress(user_id=user.id, address_id=user.addresses[0].id), asynchronous=False)
        assert _reload(user).addresses == []

    def test_remove_unknown_address(self, user):
        with pytest.raises(ObjectNotFoundError) as exc:
            current_domain.process(RemoveAddress(user_id=user.id, address_id="missing"), asynchronous=False)
        assert "Address not found" in str(exc.value)

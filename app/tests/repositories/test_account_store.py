import logging
import math

import pytest
from src.core.config import settings
from src.core.exceptions import errors
from src.domain.models import EMPTY_LOCATION, EPFL_LOCATION, Account, Location, User

ACCOUNTS = settings.ACCOUNTS_COLLECTION
PUBLIC_LOCATIONS = settings.PUBLIC_LOCATIONS_COLLECTION

NEW_YORK = Location(latitude=40.7128, longitude=-74.006, name="New York")
INFINITE = Location(latitude=math.inf, longitude=6.5, name="Nowhere")


async def assert_index_mirrors_accounts(account_store, public_locations):
    """Every public account has exactly one matching entry and no other entry exists."""
    public_accounts = {account.key: account for account in await account_store.get_all_accounts() if not account.is_private}
    entries = {entry.owner_id: entry for entry in await public_locations.get_all()}

    assert set(entries) == set(public_accounts)
    for owner_id, entry in entries.items():
        assert entry.username == public_accounts[owner_id].username
        assert entry.location == public_accounts[owner_id].location


class TestAddAccount:
    """Test cases for adding and creating accounts"""

    @pytest.mark.asyncio
    async def test_public_account_is_published(self, account_store, public_locations, account_factory):
        await account_store.add_account(account_factory("u1"))

        entries = await public_locations.get_all()
        assert [(entry.owner_id, entry.location) for entry in entries] == [("u1", EPFL_LOCATION)]

    @pytest.mark.asyncio
    async def test_private_account_is_not_published(self, account_store, public_locations, account_factory):
        await account_store.add_account(account_factory("u1", is_private=True, location=EMPTY_LOCATION))

        assert await public_locations.get_all() == []
        assert (await account_store.get_account("u1")).is_private is True

    @pytest.mark.asyncio
    async def test_uid_is_aligned_with_owner_id(self, account_store):
        stored = await account_store.add_account(Account(owner_id="u1", uid="", is_private=True))

        assert stored.uid == "u1"
        assert (await account_store.get_account("u1")).uid == "u1"

    @pytest.mark.asyncio
    async def test_duplicate_account_is_rejected(self, account_store, account_factory):
        await account_store.add_account(account_factory("u1"))

        with pytest.raises(errors.DuplicateAccountError):
            await account_store.add_account(account_factory("u1", username="other"))

        assert (await account_store.get_account("u1")).username == "user-u1"

    @pytest.mark.asyncio
    async def test_public_account_with_invalid_location_is_not_persisted(
        self, account_store, public_locations, account_factory
    ):
        with pytest.raises(errors.InvalidLocationError):
            await account_store.add_account(account_factory("u1", location=EMPTY_LOCATION))

        assert await account_store.find_account("u1") is None
        assert await public_locations.get_all() == []

    @pytest.mark.asyncio
    async def test_public_account_with_infinite_coordinate_is_not_persisted(
        self, account_store, public_locations, account_factory
    ):
        with pytest.raises(errors.InvalidLocationError):
            await account_store.add_account(account_factory("u1", location=INFINITE))

        assert await account_store.find_account("u1") is None
        assert await public_locations.get_all() == []

    @pytest.mark.asyncio
    async def test_index_failure_rolls_back_account(self, store, account_store, public_locations, account_factory):
        store.fail("set", PUBLIC_LOCATIONS)

        with pytest.raises(errors.DatabaseError):
            await account_store.add_account(account_factory("u1"))

        store.recover()
        assert await account_store.find_account("u1") is None
        await assert_index_mirrors_accounts(account_store, public_locations)

    @pytest.mark.asyncio
    async def test_create_account_builds_account_from_user(self, account_store):
        user = User(uid="u1", owner_id="u1", username="alice", profile_picture="https://img/alice.png")

        account = await account_store.create_account(user, "alice@gmail.com", "2000-01-01", EPFL_LOCATION)

        assert account.owner_id == "u1"
        assert account.google_account_email == "alice@gmail.com"
        assert account.birthday == "2000-01-01"
        assert account.profile_picture == "https://img/alice.png"
        assert await account_store.get_account("u1") == account

    @pytest.mark.asyncio
    async def test_create_account_rejects_taken_username(self, account_store, account_factory):
        await account_store.add_account(account_factory("u1", username="alice"))

        with pytest.raises(errors.TakenUsernameError):
            await account_store.create_account(User(uid="u2", username="alice"), location=EPFL_LOCATION)

        assert await account_store.find_account("u2") is None

    @pytest.mark.asyncio
    async def test_create_account_allows_blank_usernames(self, account_store):
        await account_store.create_account(User(uid="u1"), location=EPFL_LOCATION)
        await account_store.create_account(User(uid="u2"), location=EPFL_LOCATION)

        assert len(await account_store.get_all_accounts()) == 2


class TestReadAccounts:
    """Test cases for account lookups"""

    @pytest.mark.asyncio
    async def test_missing_account_raises_not_found(self, account_store):
        with pytest.raises(errors.AccountNotFoundError) as exc_info:
            await account_store.get_account("nobody")

        assert isinstance(exc_info.value, errors.NotFoundError)

    @pytest.mark.asyncio
    async def test_account_exists_requires_username(self, account_store, account_factory):
        await account_store.add_account(account_factory("u1"))
        await account_store.add_account(account_factory("u2", username="  "))

        assert await account_store.account_exists("u1") is True
        assert await account_store.account_exists("u2") is False
        assert await account_store.account_exists("nobody") is False

    @pytest.mark.asyncio
    async def test_get_all_accounts_skips_corrupt_documents(self, store, account_store, account_factory, caplog):
        await account_store.add_account(account_factory("u1"))
        await store.set(ACCOUNTS, "broken", {"ownerId": "broken", "friendUids": "not-a-list"})

        with caplog.at_level(logging.ERROR):
            accounts = await account_store.get_all_accounts()

        assert [account.key for account in accounts] == ["u1"]
        assert "broken" in caplog.text

    @pytest.mark.asyncio
    async def test_corrupt_account_read_is_a_database_error(self, store, account_store):
        await store.set(ACCOUNTS, "broken", {"friendUids": 3})

        with pytest.raises(errors.DatabaseError):
            await account_store.get_account("broken")

    @pytest.mark.asyncio
    async def test_malformed_owner_id_is_a_service_error(self, account_store):
        with pytest.raises(errors.ServiceError):
            await account_store.find_account("a/b")


class TestEditAccount:
    """Test cases for partial account updates"""

    @pytest.mark.asyncio
    async def test_blank_values_keep_current_values(self, account_store, account_factory):
        await account_store.add_account(account_factory("u1", birthday="2000-01-01", profile_picture="pic"))

        updated = await account_store.edit_account("u1", username="", birthday="  ", picture=None, location=None)

        assert updated.username == "user-u1"
        assert updated.birthday == "2000-01-01"
        assert updated.profile_picture == "pic"
        assert updated.location == EPFL_LOCATION

    @pytest.mark.asyncio
    async def test_location_without_name_keeps_current_location(self, account_store, account_factory):
        await account_store.add_account(account_factory("u1"))

        updated = await account_store.edit_account("u1", location=Location(latitude=1.0, longitude=2.0, name=""))

        assert updated.location == EPFL_LOCATION

    @pytest.mark.asyncio
    async def test_public_edit_updates_index(self, account_store, public_locations, account_factory):
        await account_store.add_account(account_factory("u1"))

        await account_store.edit_account("u1", username="alice", location=NEW_YORK)

        entries = await public_locations.get_all()
        assert entries[0].username == "alice"
        assert entries[0].location == NEW_YORK
        await assert_index_mirrors_accounts(account_store, public_locations)

    @pytest.mark.asyncio
    async def test_private_edit_leaves_index_alone(self, store, account_store, public_locations, account_factory):
        await account_store.add_account(account_factory("u1", is_private=True))
        store.calls.clear()

        await account_store.edit_account("u1", location=NEW_YORK)

        assert (await account_store.get_account("u1")).location == NEW_YORK
        assert not [call for call in store.calls if call[1] == PUBLIC_LOCATIONS]
        assert await public_locations.get_all() == []

    @pytest.mark.asyncio
    async def test_public_edit_to_invalid_location_is_rejected(self, account_store, public_locations, account_factory):
        await account_store.add_account(account_factory("u1"))
        nowhere = Location(latitude=float("nan"), longitude=0.0, name="Nowhere")

        with pytest.raises(errors.InvalidLocationError):
            await account_store.edit_account("u1", username="alice", location=nowhere)

        account = await account_store.get_account("u1")
        assert account.username == "user-u1"
        assert account.location == EPFL_LOCATION
        await assert_index_mirrors_accounts(account_store, public_locations)

    @pytest.mark.asyncio
    async def test_public_edit_to_infinite_coordinate_is_rejected(
        self, account_store, public_locations, account_factory
    ):
        await account_store.add_account(account_factory("u1"))
        far_east = Location(latitude=46.5, longitude=-math.inf, name="Far east")

        with pytest.raises(errors.InvalidLocationError):
            await account_store.edit_account("u1", location=far_east)

        assert (await account_store.get_account("u1")).location == EPFL_LOCATION
        await assert_index_mirrors_accounts(account_store, public_locations)

    @pytest.mark.asyncio
    async def test_index_failure_restores_previous_values(self, store, account_store, public_locations, account_factory):
        await account_store.add_account(account_factory("u1"))
        store.fail("set", PUBLIC_LOCATIONS)

        with pytest.raises(errors.DatabaseError):
            await account_store.edit_account("u1", username="alice", location=NEW_YORK)

        store.recover()
        account = await account_store.get_account("u1")
        assert account.username == "user-u1"
        assert account.location == EPFL_LOCATION
        await assert_index_mirrors_accounts(account_store, public_locations)

    @pytest.mark.asyncio
    async def test_edit_keeps_array_fields(self, account_store, account_factory):
        await account_store.add_account(account_factory("u1", starred_item_uids=["hat"], items_uids=["coat"]))

        await account_store.edit_account("u1", username="alice")

        account = await account_store.get_account("u1")
        assert account.starred_item_uids == ["hat"]
        assert account.items_uids == ["coat"]

    @pytest.mark.asyncio
    async def test_edit_missing_account_raises_not_found(self, account_store):
        with pytest.raises(errors.AccountNotFoundError):
            await account_store.edit_account("nobody", username="alice")

    @pytest.mark.asyncio
    async def test_delete_profile_picture(self, account_store, account_factory):
        await account_store.add_account(account_factory("u1", profile_picture="pic"))

        await account_store.delete_profile_picture("u1")

        assert (await account_store.get_account("u1")).profile_picture == ""


class TestDeleteAccount:
    """Test cases for account deletion"""

    @pytest.mark.asyncio
    async def test_delete_public_account_removes_entry(self, account_store, public_locations, account_factory):
        await account_store.add_account(account_factory("u1"))
        await account_store.add_account(account_factory("u2"))

        await account_store.delete_account("u1")

        assert await account_store.find_account("u1") is None
        assert [entry.owner_id for entry in await public_locations.get_all()] == ["u2"]

    @pytest.mark.asyncio
    async def test_delete_private_account(self, account_store, public_locations, account_factory):
        await account_store.add_account(account_factory("u1", is_private=True))

        await account_store.delete_account("u1")

        assert await account_store.find_account("u1") is None
        await assert_index_mirrors_accounts(account_store, public_locations)

    @pytest.mark.asyncio
    async def test_delete_missing_account_raises_not_found(self, account_store):
        with pytest.raises(errors.AccountNotFoundError):
            await account_store.delete_account("nobody")

    @pytest.mark.asyncio
    async def test_index_removal_failure_is_logged_not_raised(
        self, store, account_store, public_locations, account_factory, caplog
    ):
        await account_store.add_account(account_factory("u1"))
        store.fail("delete", PUBLIC_LOCATIONS)

        with caplog.at_level(logging.WARNING):
            await account_store.delete_account("u1")

        assert await account_store.find_account("u1") is None
        assert any(getattr(record, "event_type", None) == "public_location_removal_failed" for record in caplog.records)


class TestTogglePrivacy:
    """Test cases for switching accounts between private and public"""

    @pytest.mark.asyncio
    async def test_toggle_is_self_inverse(self, account_store, public_locations, account_factory):
        await account_store.add_account(account_factory("u1"))

        assert await account_store.toggle_privacy("u1") is True
        assert await public_locations.get("u1") is None
        await assert_index_mirrors_accounts(account_store, public_locations)

        assert await account_store.toggle_privacy("u1") is False
        assert (await public_locations.get("u1")).location == EPFL_LOCATION
        await assert_index_mirrors_accounts(account_store, public_locations)

    @pytest.mark.asyncio
    async def test_going_public_without_valid_location_is_rejected(
        self, account_store, public_locations, account_factory
    ):
        await account_store.add_account(account_factory("u1", is_private=True, location=EMPTY_LOCATION))

        with pytest.raises(errors.InvalidLocationError):
            await account_store.toggle_privacy("u1")

        assert (await account_store.get_account("u1")).is_private is True
        assert await public_locations.get_all() == []

    @pytest.mark.asyncio
    async def test_going_public_with_infinite_coordinate_is_rejected(
        self, account_store, public_locations, account_factory
    ):
        await account_store.add_account(account_factory("u1", is_private=True, location=INFINITE))

        with pytest.raises(errors.InvalidLocationError):
            await account_store.toggle_privacy("u1")

        assert (await account_store.get_account("u1")).is_private is True
        assert await public_locations.get_all() == []

    @pytest.mark.asyncio
    async def test_index_failure_reverts_flag(self, store, account_store, public_locations, account_factory):
        await account_store.add_account(account_factory("u1", is_private=True))
        store.fail("set", PUBLIC_LOCATIONS)

        with pytest.raises(errors.DatabaseError):
            await account_store.toggle_privacy("u1")

        store.recover()
        assert (await account_store.get_account("u1")).is_private is True
        await assert_index_mirrors_accounts(account_store, public_locations)

    @pytest.mark.asyncio
    async def test_index_removal_failure_still_makes_account_private(self, store, account_store, account_factory):
        await account_store.add_account(account_factory("u1"))
        store.fail("delete", PUBLIC_LOCATIONS)

        assert await account_store.toggle_privacy("u1") is True
        assert (await account_store.get_account("u1")).is_private is True

    @pytest.mark.asyncio
    async def test_toggle_missing_account_raises_not_found(self, account_store):
        with pytest.raises(errors.AccountNotFoundError):
            await account_store.toggle_privacy("nobody")


class TestFriendsAndItems:
    """Test cases for friend and inventory lists"""

    @pytest.mark.asyncio
    async def test_add_and_remove_friend_are_idempotent(self, account_store, account_factory):
        await account_store.add_account(account_factory("u1"))
        await account_store.add_account(account_factory("u2"))

        assert await account_store.add_friend("u1", "u2") is True
        assert await account_store.add_friend("u1", "u2") is True
        assert (await account_store.get_account("u1")).friend_uids == ["u2"]
        assert await account_store.is_my_friend("u1", "u2") is True
        assert await account_store.is_my_friend("u2", "u1") is False

        assert await account_store.remove_friend("u1", "u2") is True
        assert await account_store.remove_friend("u1", "u2") is True
        assert await account_store.is_my_friend("u1", "u2") is False

    @pytest.mark.asyncio
    async def test_friend_must_exist(self, account_store, account_factory):
        await account_store.add_account(account_factory("u1"))

        with pytest.raises(errors.AccountNotFoundError):
            await account_store.add_friend("u1", "ghost")

        with pytest.raises(errors.AccountNotFoundError):
            await account_store.remove_friend("u1", "ghost")

    @pytest.mark.asyncio
    async def test_user_must_exist(self, account_store, account_factory):
        await account_store.add_account(account_factory("u2"))

        with pytest.raises(errors.AccountNotFoundError):
            await account_store.add_friend("ghost", "u2")

        with pytest.raises(errors.AccountNotFoundError):
            await account_store.is_my_friend("ghost", "u2")

    @pytest.mark.asyncio
    async def test_items_list(self, account_store, account_factory):
        await account_store.add_account(account_factory("u1"))

        assert await account_store.add_item("u1", "coat") is True
        assert await account_store.add_item("u1", "hat") is True
        assert await account_store.add_item("u1", "coat") is True
        assert await account_store.get_items_list("u1") == ["coat", "hat"]

        assert await account_store.remove_item("u1", "coat") is True
        assert await account_store.remove_item("u1", "scarf") is True
        assert await account_store.get_items_list("u1") == ["hat"]

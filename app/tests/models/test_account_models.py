import math

import pytest
from src.domain.models import EMPTY_LOCATION, EPFL_LOCATION, Account, Location, PublicLocation, is_valid_location


class TestLocation:
    """Test cases for locations and their validity on the map"""

    def test_epfl_location_is_valid(self):
        assert is_valid_location(EPFL_LOCATION)

    def test_empty_location_is_invalid(self):
        assert not is_valid_location(EMPTY_LOCATION)

    @pytest.mark.parametrize(
        "location",
        [
            Location(latitude=46.5, longitude=6.5, name="   "),
            Location(latitude=math.nan, longitude=6.5, name="Lausanne"),
            Location(latitude=46.5, longitude=math.nan, name="Lausanne"),
            Location(latitude=math.inf, longitude=6.5, name="Lausanne"),
            Location(latitude=-math.inf, longitude=6.5, name="Lausanne"),
            Location(latitude=46.5, longitude=math.inf, name="Lausanne"),
            Location(latitude=46.5, longitude=-math.inf, name="Lausanne"),
        ],
    )
    def test_invalid_locations(self, location):
        assert not is_valid_location(location)

    def test_coordinates_are_not_range_checked(self):
        assert is_valid_location(Location(latitude=200.0, longitude=-500.0, name="Nowhere"))
        assert is_valid_location(Location(latitude=200.0, longitude=6.5, name="Nowhere"))

    def test_from_document_falls_back_on_malformed_values(self):
        assert Location.from_document("somewhere") == EMPTY_LOCATION
        assert Location.from_document({"latitude": "46", "longitude": True, "name": 3}) == EMPTY_LOCATION
        assert Location.from_document({"latitude": 40, "longitude": -73.5, "name": "New York"}) == Location(
            latitude=40.0, longitude=-73.5, name="New York"
        )


class TestAccountDocument:
    """Test cases for account document decoding"""

    def test_missing_fields_decode_to_defaults(self):
        account = Account.from_document("u1", {})

        assert account.uid == "u1"
        assert account.owner_id == "u1"
        assert account.username == ""
        assert account.friend_uids == []
        assert account.location == EMPTY_LOCATION
        assert account.is_private is False
        assert account.starred_item_uids == []

    def test_document_id_is_the_owner_id(self):
        account = Account.from_document("u1", {"uid": "other", "ownerId": "other"})

        assert account.key == "u1"
        assert account.to_document()["ownerId"] == "u1"

    def test_blank_document_id_is_rejected(self):
        with pytest.raises(ValueError):
            Account.from_document("  ", {"username": "alice"})

    def test_friend_uids_must_be_a_list(self):
        with pytest.raises(ValueError):
            Account.from_document("u1", {"friendUids": "u2"})

    def test_arrays_are_deduplicated_in_order(self):
        account = Account.from_document("u1", {"friendUids": ["u3", "u2", "u3", 4], "itemsUids": ["a", "a", "b"]})

        assert account.friend_uids == ["u3", "u2"]
        assert account.items_uids == ["a", "b"]

    def test_document_round_trip_uses_camel_case(self):
        account = Account(uid="u1", owner_id="u1", username="alice", location=EPFL_LOCATION, items_uids=["a"])

        document = account.to_document()

        assert document["googleAccountEmail"] == ""
        assert document["location"] == {"latitude": 46.5191, "longitude": 6.5668, "name": EPFL_LOCATION.name}
        assert Account.from_document("u1", document) == account

    def test_public_location_mirrors_account(self):
        account = Account(uid="u1", owner_id="u1", username="alice", location=EPFL_LOCATION)

        entry = PublicLocation.of(account)

        assert entry.to_document() == {"ownerId": "u1", "username": "alice", "location": EPFL_LOCATION.to_document()}
        assert PublicLocation.from_document(entry.to_document()) == entry

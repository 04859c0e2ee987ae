from __future__ import annotations

import pytest

from mapmarks.application.services.location_store import LocationListing, LocationStore
from mapmarks.domain.locations.entities import LocationCursor
from mapmarks.domain.locations.exceptions import ForbiddenError, LocationNotFoundError
from mapmarks.domain.users.entities import Identity
from mapmarks.shared.errors import ValidationError
from mapmarks.tests.fakes import InMemoryLocationRepository

ALICE = Identity(user_id=1, username="alice1")
BOB = Identity(user_id=2, username="bob1")


def cafe(title: str = "Cafe", **extra):
    return {
        "title": title,
        "rating": 4,
        "location": {"coordinates": [174.76, -36.85]},
        **extra,
    }


@pytest.fixture()
def repository() -> InMemoryLocationRepository:
    return InMemoryLocationRepository()


@pytest.fixture()
def store(repository: InMemoryLocationRepository) -> LocationStore:
    return LocationStore(locations=repository)


def test_create_and_get(store: LocationStore) -> None:
    created = store.create(ALICE, cafe(description="Flat whites"))

    fetched = store.get_by_id(created.id)
    assert fetched == created
    assert fetched.created_by.id == ALICE.user_id
    assert fetched.point.to_coordinates() == [174.76, -36.85]


def test_invalid_fields_are_not_persisted(
    store: LocationStore, repository: InMemoryLocationRepository
) -> None:
    with pytest.raises(ValidationError):
        store.create(ALICE, cafe(title="ab"))
    assert len(repository) == 0


def test_get_missing(store: LocationStore) -> None:
    with pytest.raises(LocationNotFoundError):
        store.get_by_id(99)


def test_owner_deletes_once(store: LocationStore) -> None:
    location = store.create(ALICE, cafe())

    store.delete(location.id, ALICE)

    with pytest.raises(LocationNotFoundError):
        store.delete(location.id, ALICE)
    with pytest.raises(LocationNotFoundError):
        store.get_by_id(location.id)


def test_other_user_cannot_delete(store: LocationStore) -> None:
    location = store.create(ALICE, cafe())

    with pytest.raises(ForbiddenError):
        store.delete(location.id, BOB)

    assert store.get_by_id(location.id) == location
    assert len(list(store.list())) == 1


def test_listing_is_newest_first(store: LocationStore) -> None:
    for title in ("First", "Second", "Third"):
        store.create(ALICE, cafe(title))

    assert [loc.title for loc in store.list()] == ["Third", "Second", "First"]


def test_listing_pages_lazily_and_restarts(
    store: LocationStore, repository: InMemoryLocationRepository
) -> None:
    for index in range(5):
        store.create(ALICE, cafe(f"Spot {index}"))
    listing = LocationListing(repository, batch_size=2)

    iterator = iter(listing)
    assert next(iterator).title == "Spot 4"
    assert repository.page_calls == 1

    assert [loc.title for loc in iterator] == ["Spot 3", "Spot 2", "Spot 1", "Spot 0"]
    # 2 + 2 + 1: the short page ends the walk
    assert repository.page_calls == 3

    store.create(ALICE, cafe("Spot 5"))
    assert [loc.title for loc in listing][:2] == ["Spot 5", "Spot 4"]


def test_page_seam(store: LocationStore) -> None:
    for index in range(3):
        store.create(ALICE, cafe(f"Spot {index}"))
    listing = store.list()

    first = listing.page(limit=2)
    rest = listing.page(after=LocationCursor.after(first[-1]), limit=2)

    assert [loc.title for loc in first] == ["Spot 2", "Spot 1"]
    assert [loc.title for loc in rest] == ["Spot 0"]


def test_query_matches_title_or_description(store: LocationStore) -> None:
    store.create(ALICE, cafe("Harbour view"))
    store.create(ALICE, cafe("Bakery", description="Great HARBOUR pastries"))
    store.create(ALICE, cafe("Museum"))

    assert {loc.title for loc in store.list("harbour")} == {"Harbour view", "Bakery"}
    assert len(list(store.list("   "))) == 3



@pytest.mark.parametrize("location_id", [0, -1, 2**63, 10**23])
def test_ids_outside_key_range_are_not_found(
    store: LocationStore, repository: InMemoryLocationRepository, location_id: int
) -> None:
    store.create(ALICE, cafe())

    with pytest.raises(LocationNotFoundError):
        store.get_by_id(location_id)
    with pytest.raises(LocationNotFoundError):
        store.delete(location_id, ALICE)
    assert len(repository) == 1

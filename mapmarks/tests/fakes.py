from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from datetime import UTC, datetime, timedelta

from mapmarks.domain.locations.entities import Location, LocationCursor, NewLocation, Owner
from mapmarks.domain.locations.repositories import DeleteOutcome, LocationRepository
from mapmarks.domain.users.entities import User
from mapmarks.domain.users.exceptions import UserAlreadyExistsError, UserNotFoundError
from mapmarks.domain.users.repositories import PasswordHasher, UserRepository


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class DeterministicHasher(PasswordHasher):
    def __init__(self) -> None:
        self.hash_calls = 0
        self.verify_calls = 0

    def hash(self, password: str) -> str:
        self.hash_calls += 1
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        self.verify_calls += 1
        return hashed == f"hashed:{password}"


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._seq = 1

    def find_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

    def find_by_id(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    def add(self, user: User) -> User:
        if self.find_by_username(user.username) is not None:
            raise UserAlreadyExistsError()
        new_user = replace(user, id=self._seq)
        self._seq += 1
        self._users[new_user.id] = new_user
        return new_user

    def set_last_login(self, user_id: int, when: datetime) -> None:
        self._users[user_id] = replace(self._users[user_id], last_login=when)

    def rename(self, user_id: int, username: str) -> User:
        if user_id not in self._users:
            raise UserNotFoundError()
        self._users[user_id] = replace(self._users[user_id], username=username)
        return self._users[user_id]

    def __len__(self) -> int:
        return len(self._users)


class InMemoryLocationRepository(LocationRepository):
    def __init__(self, users: InMemoryUserRepository | None = None) -> None:
        self._users = users
        self._rows: dict[int, Location] = {}
        self._seq = 1
        self._clock = FakeClock()
        self.page_calls = 0

    def add(self, location: NewLocation) -> Location:
        owner = self._users.find_by_id(location.created_by) if self._users else None
        self._clock.advance(1)
        stored = Location(
            id=self._seq,
            title=location.title,
            description=location.description,
            rating=location.rating,
            price=location.price,
            point=location.point,
            created_by=Owner(
                id=location.created_by,
                username=owner.username if owner else f"user{location.created_by}",
            ),
            created_at=self._clock(),
        )
        self._rows[stored.id] = stored
        self._seq += 1
        return stored

    def find_by_id(self, location_id: int) -> Location | None:
        return self._rows.get(location_id)

    def list_page(
        self,
        *,
        after: LocationCursor | None,
        limit: int,
        query: str | None = None,
    ) -> Sequence[Location]:
        self.page_calls += 1
        rows = sorted(self._rows.values(), key=lambda r: (r.created_at, r.id), reverse=True)
        if after is not None:
            rows = [r for r in rows if (r.created_at, r.id) < (after.created_at, after.id)]
        if query:
            needle = query.lower()
            rows = [
                r
                for r in rows
                if needle in r.title.lower() or needle in (r.description or "").lower()
            ]
        return rows[:limit]

    def delete_owned(self, location_id: int, owner_id: int) -> DeleteOutcome:
        row = self._rows.get(location_id)
        if row is None:
            return DeleteOutcome.NOT_FOUND
        if row.created_by.id != owner_id:
            return DeleteOutcome.FORBIDDEN
        del self._rows[location_id]
        return DeleteOutcome.DELETED

    def __len__(self) -> int:
        return len(self._rows)

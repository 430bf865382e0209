from dataclasses import dataclass, field
from typing import Any, Generic, Optional, Tuple, TypeVar

from .errors import BusyError, FlavorSyncError


T = TypeVar("T")

# Owner may arrive under any of these keys depending on the backend
OWNER_KEYS = ("ownerId", "userId", "owner_id")


@dataclass(frozen=True)
class Flavor:
    id: str
    name: str
    owner_id: Optional[str] = None

    def to_payload(self) -> dict:
        payload = {"id": self.id, "name": self.name}
        if self.owner_id is not None:
            payload["ownerId"] = self.owner_id
        return payload

    @classmethod
    def from_payload(cls, data: Any) -> "Flavor":
        """Parse one remote record, raising ValueError when required fields are missing."""
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object, got {type(data).__name__}")

        raw_id = data.get("id")
        if isinstance(raw_id, bool) or not isinstance(raw_id, (str, int)):
            raise ValueError(f"Missing or invalid id: {raw_id!r}")
        flavor_id = str(raw_id)
        if not flavor_id:
            raise ValueError("Empty id")

        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"Missing or invalid name for id {flavor_id}")

        owner_id = None
        for key in OWNER_KEYS:
            value = data.get(key)
            if isinstance(value, str) and value:
                owner_id = value
                break

        return cls(id=flavor_id, name=name, owner_id=owner_id)


@dataclass(frozen=True)
class BusyState:
    loading: bool = False
    mutating: bool = False


@dataclass(frozen=True)
class SyncState:
    """Read-only view of the synchronizer for the presentation layer."""

    identity: Optional[str]
    busy: BusyState
    flavors: Tuple[Flavor, ...] = field(default_factory=tuple)

    @property
    def authenticated(self) -> bool:
        return self.identity is not None

    def to_dict(self) -> dict:
        return {
            "identity": self.identity,
            "authenticated": self.authenticated,
            "busy": {"loading": self.busy.loading, "mutating": self.busy.mutating},
            "flavors": [flavor.to_payload() for flavor in self.flavors],
        }


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Typed result of a synchronizer operation: a value or an error, never both."""

    value: Optional[T] = None
    error: Optional[FlavorSyncError] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: FlavorSyncError) -> "Outcome[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def busy(self) -> bool:
        return isinstance(self.error, BusyError)

"""Root conftest: shared test configuration and fake flavor stores.

Environment defaults are set before flavor_sync is imported because Config
reads the environment at class definition time.
"""

import os
import threading

import pytest

os.environ.setdefault("FLAVOR_API_BASE_URL", "http://flavors.test")
os.environ.setdefault("FLAVOR_STORE_BACKEND", "rest")
os.environ.setdefault("FLAVOR_REQUIRE_SIGN_IN", "true")
os.environ.setdefault("SUPABASE_URL", "")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "")

from flavor_sync.core.models import Flavor  # noqa: E402


class FakeFlavorStore:
    """In-memory stand-in for the remote store; records every call."""

    def __init__(self, flavors=None):
        self.flavors = list(flavors or [])
        self.calls = []
        self.failures = {}

    def _maybe_fail(self, op):
        error = self.failures.get(op)
        if error is not None:
            raise error

    def list_flavors(self):
        self.calls.append(("list",))
        self._maybe_fail("list")
        return list(self.flavors)

    def create_flavor(self, flavor):
        self.calls.append(("create", flavor))
        self._maybe_fail("create")
        self.flavors.append(flavor)

    def delete_flavor(self, flavor_id):
        self.calls.append(("delete", flavor_id))
        self._maybe_fail("delete")
        self.flavors = [f for f in self.flavors if f.id != flavor_id]


class BlockingFlavorStore(FakeFlavorStore):
    """Holds the named operation in its worker thread until ``release`` is set."""

    def __init__(self, flavors=None, block=("create", "delete", "list")):
        super().__init__(flavors)
        self.block = set(block)
        self.entered = threading.Event()
        self.release = threading.Event()

    def _wait(self, op):
        if op in self.block:
            self.entered.set()
            self.release.wait(5)

    def list_flavors(self):
        self._wait("list")
        return super().list_flavors()

    def create_flavor(self, flavor):
        self._wait("create")
        super().create_flavor(flavor)

    def delete_flavor(self, flavor_id):
        self._wait("delete")
        super().delete_flavor(flavor_id)


@pytest.fixture
def seed_flavors():
    return [
        Flavor(id="1", name="Vanilla", owner_id="a@example.com"),
        Flavor(id="2", name="Chocolate", owner_id="b@example.com"),
        Flavor(id="3", name="Pistachio", owner_id="a@example.com"),
    ]


@pytest.fixture
def store():
    return FakeFlavorStore()


@pytest.fixture
def seeded_store(seed_flavors):
    return FakeFlavorStore(seed_flavors)


@pytest.fixture
def blocking_store():
    store = BlockingFlavorStore()
    yield store
    store.release.set()


@pytest.fixture
def make_store():
    return FakeFlavorStore

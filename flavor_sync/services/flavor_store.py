import logging
from typing import List, Optional, Protocol
from urllib.parse import quote

from ..core.config import Config
from ..core.errors import CreateError, DeleteError, FetchError
from ..core.http import HttpRequestError, request_json
from ..core.models import Flavor


logger = logging.getLogger(__name__)


class FlavorStore(Protocol):
    """Remote system of record. Methods block; failures raise RemoteStoreError subclasses."""

    def list_flavors(self) -> List[Flavor]: ...

    def create_flavor(self, flavor: Flavor) -> None: ...

    def delete_flavor(self, flavor_id: str) -> None: ...


def parse_flavor_list(data) -> List[Flavor]:
    if not isinstance(data, list):
        raise FetchError(f"Expected a JSON array of flavors, got {type(data).__name__}")
    try:
        return [Flavor.from_payload(item) for item in data]
    except ValueError as e:
        logger.error(f"Malformed flavor payload: {e}")
        raise FetchError(f"Malformed flavor payload: {e}")


class RestFlavorStore:
    """Key-value style REST collection: GET/POST the collection, DELETE by id."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        collection_path: Optional[str] = None,
        delete_path: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.base_url = (base_url if base_url is not None else Config.FLAVOR_API_BASE_URL).rstrip("/")
        self.collection_path = collection_path or Config.FLAVOR_COLLECTION_PATH
        self.delete_path = delete_path or Config.FLAVOR_DELETE_PATH
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else Config.http_timeout_seconds()

    @property
    def collection_url(self) -> str:
        return f"{self.base_url}{self.collection_path}"

    def item_url(self, flavor_id: str) -> str:
        return f"{self.base_url}{self.delete_path.format(id=quote(flavor_id, safe=''))}"

    def list_flavors(self) -> List[Flavor]:
        try:
            data = request_json("GET", self.collection_url, timeout_seconds=self.timeout_seconds)
        except HttpRequestError as e:
            raise FetchError(status_code=e.status_code) from e
        return parse_flavor_list(data)

    def create_flavor(self, flavor: Flavor) -> None:
        try:
            request_json(
                "POST",
                self.collection_url,
                flavor.to_payload(),
                timeout_seconds=self.timeout_seconds,
                expect_json=False,
            )
        except HttpRequestError as e:
            raise CreateError(status_code=e.status_code) from e

    def delete_flavor(self, flavor_id: str) -> None:
        try:
            request_json(
                "DELETE",
                self.item_url(flavor_id),
                timeout_seconds=self.timeout_seconds,
                expect_json=False,
            )
        except HttpRequestError as e:
            raise DeleteError(status_code=e.status_code) from e


def get_store() -> FlavorStore:
    """Build the store selected by FLAVOR_STORE_BACKEND."""
    if Config.FLAVOR_STORE_BACKEND == "supabase":
        from .supabase_store import SupabaseFlavorStore

        return SupabaseFlavorStore()
    return RestFlavorStore()

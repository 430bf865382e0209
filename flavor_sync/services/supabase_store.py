import logging
from typing import List, Optional

from supabase import create_client, Client

from ..core.config import Config
from ..core.errors import CreateError, DeleteError, FetchError
from ..core.models import Flavor
from .flavor_store import parse_flavor_list


logger = logging.getLogger(__name__)


def get_client() -> Client:
    return create_client(Config.SUPABASE_URL, Config.SUPABASE_SERVICE_KEY)


def _response_error(result) -> Optional[str]:
    if isinstance(result, dict):
        return result.get('error') or result.get('message')
    if hasattr(result, 'error') and getattr(result, 'error'):
        return str(getattr(result, 'error'))
    status_code = getattr(result, 'status_code', None)
    if isinstance(status_code, int) and status_code >= 400:
        return f"HTTP {status_code}"
    return None


class SupabaseFlavorStore:
    """Flavor collection kept in a Supabase table with columns id, name, owner_id."""

    def __init__(self, client: Optional[Client] = None, table: Optional[str] = None):
        self._client = client
        self.table = table or Config.SUPABASE_TABLE

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_client()
        return self._client

    def list_flavors(self) -> List[Flavor]:
        try:
            result = (
                self.client
                .table(self.table)
                .select('id, name, owner_id')
                .order('created_at')
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch flavors from Supabase: {e}")
            raise FetchError() from e

        error = _response_error(result)
        if error:
            logger.error(f"Supabase select error: {error}")
            raise FetchError(f"Failed loading flavors: {error}")
        return parse_flavor_list(result.data or [])

    def create_flavor(self, flavor: Flavor) -> None:
        row = {'id': flavor.id, 'name': flavor.name, 'owner_id': flavor.owner_id}
        try:
            result = self.client.table(self.table).insert(row).execute()
        except Exception as e:
            logger.error(f"Failed to insert flavor {flavor.id}: {e}")
            raise CreateError() from e

        error = _response_error(result)
        if error:
            logger.error(f"Supabase insert error: {error}")
            raise CreateError(f"Failed adding flavor: {error}")

    def delete_flavor(self, flavor_id: str) -> None:
        try:
            result = self.client.table(self.table).delete().eq('id', flavor_id).execute()
        except Exception as e:
            logger.error(f"Failed to delete flavor {flavor_id}: {e}")
            raise DeleteError() from e

        error = _response_error(result)
        if error:
            logger.error(f"Supabase delete error: {error}")
            raise DeleteError(f"Failed deleting flavor: {error}")

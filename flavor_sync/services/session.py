import logging
from typing import Tuple

from ..core.models import Flavor, Outcome
from ..core.validation import validate_sign_in, validate_sign_up
from .synchronizer import CollectionSynchronizer


logger = logging.getLogger(__name__)


class LocalSession:
    """Local, unverified sign-in gate that drives identity transitions.

    Nothing here is access control: the email becomes the identity label used
    to scope the flavor list, and no credential is stored or checked remotely.
    """

    def __init__(self, synchronizer: CollectionSynchronizer):
        self.synchronizer = synchronizer

    @property
    def authenticated(self) -> bool:
        return self.synchronizer.identity is not None

    async def sign_in(self, email: str, password: str) -> Outcome[Tuple[Flavor, ...]]:
        identity = validate_sign_in(email, password)
        return await self.synchronizer.sign_in(identity)

    def sign_up(self, email: str, password: str, confirm_password: str) -> str:
        """Check the sign-up form; the account is not persisted anywhere."""
        identity = validate_sign_up(email, password, confirm_password)
        logger.info(f"Account form accepted for {identity}")
        return identity

    def sign_out(self) -> None:
        self.synchronizer.sign_out()

import asyncio
import logging
import time
from datetime import datetime
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .core.config import Config
from .core.errors import FlavorSyncError, NotSignedIn
from .core.middleware import (
    ALLOWED_METHODS,
    flavor_sync_error_handler,
    global_exception_handler,
    log_requests,
)
from .core.models import Outcome
from .services.flavor_store import get_store
from .services.session import LocalSession
from .services.synchronizer import CollectionSynchronizer

logger = logging.getLogger(__name__)


class FlavorCreate(BaseModel):
    name: str


class SignInRequest(BaseModel):
    email: str = ""
    password: str = ""


class SignUpRequest(BaseModel):
    email: str = ""
    password: str = ""
    confirm_password: str = ""


def _unwrap(outcome: Outcome):
    if not outcome.ok:
        raise outcome.error
    return outcome.value


def _notice(outcome: Outcome) -> Optional[dict]:
    return None if outcome.ok else outcome.error.to_response()["error"]


def get_session(request: Request) -> LocalSession:
    """Return the app's session, building the store-backed synchronizer on first use."""
    state = request.app.state
    if state.session is None:
        state.session = LocalSession(CollectionSynchronizer(get_store()))
    return state.session


def get_synchronizer(session: LocalSession = Depends(get_session)) -> CollectionSynchronizer:
    return session.synchronizer


def create_app(
    synchronizer: Optional[CollectionSynchronizer] = None,
    *,
    require_sign_in: Optional[bool] = None,
) -> FastAPI:
    """Build the presentation API around a single synchronizer.

    The API keeps no state of its own: every response is read from the
    synchronizer, and failed operations are raised as FlavorSyncError so the
    registered handler renders one notice per failed call.
    """
    if require_sign_in is None:
        require_sign_in = Config.FLAVOR_REQUIRE_SIGN_IN

    app = FastAPI(title="Flavor Sync API")
    app.state.session = LocalSession(synchronizer) if synchronizer is not None else None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=Config.allowed_origins(),
        allow_credentials=True,
        allow_methods=ALLOWED_METHODS,
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def _log_requests(request, call_next):
        return await log_requests(request, call_next)

    app.add_exception_handler(FlavorSyncError, flavor_sync_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    def signed_in_synchronizer(
        synchronizer: CollectionSynchronizer = Depends(get_synchronizer),
    ) -> CollectionSynchronizer:
        if require_sign_in and synchronizer.identity is None:
            raise NotSignedIn()
        return synchronizer

    @app.get("/state")
    async def read_state(synchronizer: CollectionSynchronizer = Depends(get_synchronizer)):
        """Everything a UI shell needs to render: identity, busy flags, flavors."""
        return synchronizer.state().to_dict()

    @app.get("/flavors")
    async def list_flavors(synchronizer: CollectionSynchronizer = Depends(signed_in_synchronizer)):
        return [flavor.to_payload() for flavor in synchronizer.snapshot]

    @app.post("/flavors/refresh")
    async def refresh_flavors(synchronizer: CollectionSynchronizer = Depends(signed_in_synchronizer)):
        flavors = _unwrap(await synchronizer.load())
        return [flavor.to_payload() for flavor in flavors]

    @app.post("/flavors", status_code=201)
    async def add_flavor(
        body: FlavorCreate,
        synchronizer: CollectionSynchronizer = Depends(signed_in_synchronizer),
    ):
        flavor = _unwrap(await synchronizer.add(body.name))
        return flavor.to_payload()

    @app.delete("/flavors/{flavor_id}")
    async def delete_flavor(
        flavor_id: str,
        synchronizer: CollectionSynchronizer = Depends(signed_in_synchronizer),
    ):
        _unwrap(await synchronizer.remove(flavor_id))
        return {"status": "deleted", "id": flavor_id}

    @app.post("/session/sign-in")
    async def sign_in(body: SignInRequest, session: LocalSession = Depends(get_session)):
        """Sign in locally and load the identity's flavors.

        A failed load does not undo the sign-in; it is returned as a notice.
        """
        outcome = await session.sign_in(body.email, body.password)
        return {
            "state": session.synchronizer.state().to_dict(),
            "notice": _notice(outcome),
        }

    @app.post("/session/sign-up")
    async def sign_up(body: SignUpRequest, session: LocalSession = Depends(get_session)):
        identity = session.sign_up(body.email, body.password, body.confirm_password)
        return {
            "status": "success",
            "email": identity,
            "message": "Account created! You can now sign in.",
        }

    @app.post("/session/sign-out")
    async def sign_out(session: LocalSession = Depends(get_session)):
        session.sign_out()
        return session.synchronizer.state().to_dict()

    @app.get("/health")
    async def health_check(synchronizer: CollectionSynchronizer = Depends(get_synchronizer)):
        """Configuration and remote store reachability."""
        health_start_time = time.time()

        try:
            Config.validate()
            await asyncio.to_thread(synchronizer.store.list_flavors)

            health_duration = time.time() - health_start_time

            return {
                "status": "healthy",
                "service": "flavor-sync-api",
                "timestamp": datetime.now().isoformat(),
                "response_time_ms": round(health_duration * 1000, 2)
            }
        except Exception as e:
            health_duration = time.time() - health_start_time
            logger.error(f"Health check failed: {str(e)} - Duration: {health_duration:.1f}s")

            return {
                "status": "unhealthy",
                "service": "flavor-sync-api",
                "timestamp": datetime.now().isoformat(),
                "error": str(e),
                "response_time_ms": round(health_duration * 1000, 2)
            }

    @app.get("/")
    async def root():
        return {
            "service": "Flavor Sync API",
            "version": "1.0",
            "endpoints": {
                "state": "/state",
                "flavors": "/flavors",
                "refresh": "/flavors/refresh",
                "sign_in": "/session/sign-in",
                "sign_up": "/session/sign-up",
                "sign_out": "/session/sign-out",
                "health": "/health"
            },
            "timestamp": datetime.now().isoformat(),
            "description": "Keeps a per-user flavor list in sync with a remote store"
        }

    return app


app = create_app()

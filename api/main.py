"""
RTWPilot API

Compliance alerts and workload views for return-to-work case management.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rtwpilot import __version__
from rtwpilot.config import config_from_env
from rtwpilot.records import FileCaseRepository, StaticIdentityProvider

from api.demo_cases import DemoCaseRepository
from api.routes import flags, notifications, workloads
from api.state import ServiceState, get_state, set_state

logger = logging.getLogger(__name__)

CASES_ENV_VAR = "RTWPILOT_CASES"


def build_state() -> ServiceState:
    """
    Build service state from the environment.

    RTWPILOT_CASES names a YAML/JSON case file; without it the demo cases
    are served. RTWPILOT_CONFIG names an engine config file.
    """
    config = config_from_env()

    cases_path = os.environ.get(CASES_ENV_VAR)
    if cases_path:
        repository = FileCaseRepository(cases_path)
        users = repository.list_users()
        logger.info("Serving cases from %s", cases_path)
    else:
        repository = DemoCaseRepository()
        users = repository.list_users()
        logger.info("No %s set, serving demo cases", CASES_ENV_VAR)

    return ServiceState(
        repository=repository,
        identity=StaticIdentityProvider(users),
        config=config,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load configuration and the case repository on startup."""
    logger.info("Starting RTWPilot API %s", __version__)
    set_state(build_state())

    yield

    logger.info("Shutting down...")
    set_state(None)


# Create app
app = FastAPI(
    title="RTWPilot API",
    description="""
**Compliance alerts and workload derivation for return-to-work case management.**

Every response is derived on request from the current case list, the
requesting user and a reference instant (`now`, defaulting to the clock).

## Features

- **Notifications**: personalised, prioritised alerts with session read/dismiss state
- **Case Flags**: supervisor-facing compliance concerns per case
- **Workloads**: per-consultant counters, load band and urgent task queue
    """,
    version=__version__,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(notifications.router)
app.include_router(flags.router)
app.include_router(workloads.router)


@app.get("/health", tags=["Health"])
async def health():
    """Health check endpoint."""
    state = get_state()
    return {
        "healthy": True,
        "version": __version__,
        "users_loaded": len(state.identity.list_user_directory()),
    }


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=8000)

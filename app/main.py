"""FastAPI app: NZBGeek search proxy and SABnzbd enqueue endpoints."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.config import settings
from app.executor import SubprocessExecutor
from app.logging_config import setup_logging
from app.nzbgeek import NzbGeekClient, NzbGeekError
from app.sabnzbd import SabnzbdCli, SabnzbdError
from app.schemas import ErrorResponse, MessageResponse, SaveRequest
from app.tracing import setup_tracing, shutdown_tracing

SERVICE_NAME = "nzb-relay"

setup_logging(
    service_name=SERVICE_NAME,
    environment=settings.ENV,
    secrets=[settings.NZBGEEK_API_KEY],
)
setup_tracing(service_name=SERVICE_NAME, environment=settings.ENV)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    yield
    shutdown_tracing()


app = FastAPI(title="nzb-relay", lifespan=lifespan)


@lru_cache
def get_nzbgeek_client() -> NzbGeekClient:
    """Search client built once from settings; the API key is fixed for the process."""
    return NzbGeekClient(
        api_key=settings.NZBGEEK_API_KEY,
        base_url=settings.NZBGEEK_API_URL,
        timeout=settings.NZBGEEK_TIMEOUT_SECONDS,
    )


@lru_cache
def get_sabnzbd_cli() -> SabnzbdCli:
    return SabnzbdCli(
        executable=settings.SABCMD_PATH,
        executor=SubprocessExecutor(
            timeout=settings.SABCMD_TIMEOUT_SECONDS,
            max_concurrency=settings.SABCMD_MAX_CONCURRENCY,
        ),
        fail_on_stderr=settings.SABCMD_FAIL_ON_STDERR,
    )


def _json(status_code: int, model: ErrorResponse | MessageResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=model.model_dump())


@app.exception_handler(RequestValidationError)
def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 for body validation errors (e.g. a body that is not a JSON object)."""
    return JSONResponse(status_code=400, content={"detail": "Invalid request body"})


@app.get("/health")
def health() -> dict[str, str]:
    """Health check: returns 200 when API is up."""
    return {"status": "ok"}


@app.get("/api/search")
def search(
    q: str | None = None,
    client: NzbGeekClient = Depends(get_nzbgeek_client),
) -> JSONResponse:
    """Relay a search to NZBGeek and return its JSON body unmodified."""
    if not q:
        return _json(400, ErrorResponse(error="Missing query parameter `q`"))
    try:
        data = client.search(q)
    except NzbGeekError:
        return _json(500, ErrorResponse(error="Failed to fetch from NZBgeek"))
    return JSONResponse(status_code=200, content=data)


@app.post("/api/save")
def save(
    body: SaveRequest | None = None,
    cli: SabnzbdCli = Depends(get_sabnzbd_cli),
) -> JSONResponse:
    """Enqueue downloadUrl with sabcmd."""
    if body is None or not body.downloadUrl:
        return _json(400, MessageResponse(message="No download URL provided"))
    try:
        cli.add_nzb(body.downloadUrl)
    except SabnzbdError:
        return _json(500, MessageResponse(message="Failed to execute SABnzbd command"))
    return _json(200, MessageResponse(message="NZB added to SABnzbd successfully"))

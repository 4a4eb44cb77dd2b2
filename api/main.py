from __future__ import annotations

import logging
from pathlib import Path

from dotenv import load_dotenv

# Load the project-root .env before any settings are read
project_root = Path(__file__).parent.parent
env_path = project_root / ".env"
env_loaded = load_dotenv(env_path) if env_path.exists() else False

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import facts_service as facts_service_module
from .errors import FactsServiceError, FailureKind
from .facts_service import FactsService
from .models import HealthStatus
from .rate_limit import build_rate_limiter
from .routes import router
from .security import SECURITY_HEADERS, security_headers_middleware
from .settings import get_site_settings
from facts.utils.logging import configure_logging

site_settings = get_site_settings()
configure_logging(site_settings.log_level, json_enabled=site_settings.log_json)
logger = logging.getLogger(__name__)
if not env_loaded:
    logger.info("config.dotenv_missing", extra={"path": str(env_path)})

app = FastAPI(title="Curiosity Facts API", version="0.1.0")

# One limiter per process, shared by every request
facts_service_module.facts_service = FactsService(build_rate_limiter(site_settings))

app.middleware("http")(security_headers_middleware)
app.include_router(router)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    # Runs outside the http middleware, so headers are set here
    logger.error("request.unhandled_error", extra={"path": request.url.path}, exc_info=exc)
    error = FactsServiceError(FailureKind.INTERNAL_ERROR)
    return JSONResponse(status_code=error.status_code, content=error.public_body(), headers=SECURITY_HEADERS)


@app.get("/healthz", tags=["system"], response_model=HealthStatus)
async def healthcheck() -> HealthStatus:
    return HealthStatus(status="ok")

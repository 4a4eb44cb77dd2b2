from __future__ import annotations

import logging
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from .errors import FactsServiceError, FailureKind
from .facts_service import FactsService, get_facts_service
from .models import GenerateRequest
from .security import check_origin, client_identity
from .settings import get_site_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

ServiceDep = Annotated[FactsService, Depends(get_facts_service)]

GENERATE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT"]


def _error_response(exc: FactsServiceError, headers: Dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.public_body(), headers=headers)


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return {}


@router.api_route("/generate", methods=GENERATE_METHODS, response_model=None)
async def generate_route(request: Request, service: ServiceDep) -> Response:
    """Return five validated curiosity facts for an authenticated caller.

    Method dispatch happens here rather than in the router so that every
    outcome, including 403/405, goes through the same error mapping.
    """
    try:
        allowed_origin = get_site_settings().allowed_origin
    except RuntimeError:
        return _error_response(FactsServiceError(FailureKind.MISCONFIGURED))

    origin = check_origin(request.headers.get("origin"), allowed_origin)
    if not origin.allowed:
        return _error_response(FactsServiceError(FailureKind.ORIGIN_FORBIDDEN))

    if request.method == "OPTIONS":
        return Response(status_code=204, headers=origin.headers)
    if request.method != "POST":
        return _error_response(FactsServiceError(FailureKind.METHOD_NOT_ALLOWED), origin.headers)

    payload = GenerateRequest.from_payload(await _read_json(request))
    try:
        batch = await service.generate(client_identity(request), payload)
    except FactsServiceError as exc:
        return _error_response(exc, origin.headers)
    try:
        return JSONResponse(status_code=200, content=batch, headers=origin.headers)
    except (TypeError, ValueError) as exc:
        logger.exception("generate.render_error", extra={"error": str(exc)})
        return _error_response(FactsServiceError(FailureKind.INTERNAL_ERROR), origin.headers)

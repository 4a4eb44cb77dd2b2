"""Request gate for curiosity fact generation.

Admits the caller, checks configuration, authenticates, resolves the caller's
date, asks the upstream model for a batch and only hands back output that
passed extraction and validation.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from api.errors import FactsServiceError, FailureKind
from api.models import GenerateRequest
from api.rate_limit import RateLimiter
from api.security import credentials_match
from api.settings import SiteSettings, get_site_settings
from facts.prompts.templates import build_curiosity_messages
from facts.timezones import FellBackToDefault, resolve_timezone, today_in
from facts.validation import (
    ExtractionFailure,
    InvalidJSON,
    add_legacy_source_fields,
    parse_model_output,
    validate_batch,
)
from llm.client import EmptyCompletionError, LLMClient, LLMError, UpstreamError, build_llm_client
from llm.settings import GenerationSettings, get_generation_settings


ClientFactory = Callable[[GenerationSettings], LLMClient]


class FactsService:
    """Business logic behind ``POST /api/generate``."""

    def __init__(
        self,
        rate_limiter: RateLimiter,
        *,
        client_factory: Optional[ClientFactory] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.rate_limiter = rate_limiter
        self.client_factory = client_factory or build_llm_client
        self._sleep = sleep
        self._now = now
        self.logger = logging.getLogger(__name__)

    async def generate(self, identity: str, request: GenerateRequest) -> Dict[str, Any]:
        trace_id = uuid.uuid4().hex
        try:
            return await self._generate(identity, request, trace_id)
        except FactsServiceError:
            raise
        except Exception as exc:
            self.logger.exception("generate.unexpected_error", extra={"trace_id": trace_id})
            raise FactsServiceError(FailureKind.INTERNAL_ERROR, trace_id) from exc

    async def _generate(self, identity: str, request: GenerateRequest, trace_id: str) -> Dict[str, Any]:
        # Redis-backed admission is a network round trip; keep it off the loop
        loop = asyncio.get_running_loop()
        if not await loop.run_in_executor(None, self.rate_limiter.admit, identity):
            self.logger.warning("generate.rate_limited", extra={"trace_id": trace_id, "identity": identity})
            raise FactsServiceError(FailureKind.RATE_LIMITED, trace_id)

        site, generation = self._load_settings(trace_id)

        if not credentials_match(request.password, site.password()):
            self.logger.info("generate.unauthorized", extra={"trace_id": trace_id, "identity": identity})
            await self._sleep(site.auth_failure_delay_ms / 1000.0)
            raise FactsServiceError(FailureKind.AUTH, trace_id)

        zone = resolve_timezone(request.timezone, max_length=site.timezone_max_length)
        if isinstance(zone, FellBackToDefault) and request.timezone:
            self.logger.info("generate.timezone_fallback", extra={"trace_id": trace_id, "reason": zone.reason})
        today = today_in(zone, self._now() if self._now else None)

        self.logger.info(
            "generate.start",
            extra={
                "trace_id": trace_id,
                "provider": generation.llm_provider,
                "model": generation.active_model(),
                "timezone": zone.zone_name,
            },
        )
        messages = build_curiosity_messages(today, reader_name=generation.facts_reader_name)
        text = await self._call_upstream(generation, messages, trace_id)
        return self._accept_output(text, trace_id)

    def _load_settings(self, trace_id: str) -> Tuple[SiteSettings, GenerationSettings]:
        try:
            site = get_site_settings()
            generation = get_generation_settings()
        except RuntimeError as exc:
            self.logger.error("generate.misconfigured", extra={"trace_id": trace_id, "error": str(exc)})
            raise FactsServiceError(FailureKind.MISCONFIGURED, trace_id) from exc

        missing = [
            name
            for name, present in (
                ("SITE_PASSWORD", bool(site.password())),
                ("provider api key", bool(generation.active_api_key())),
            )
            if not present
        ]
        if missing:
            self.logger.error("generate.misconfigured", extra={"trace_id": trace_id, "missing": missing})
            raise FactsServiceError(FailureKind.MISCONFIGURED, trace_id)
        return site, generation

    async def _call_upstream(self, generation: GenerationSettings, messages: list, trace_id: str) -> str:
        client = self.client_factory(generation)
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, client.complete, messages)
        except UpstreamError as exc:
            self.logger.warning(
                "generate.upstream_error",
                extra={"trace_id": trace_id, **exc.diagnostics()},
            )
            raise FactsServiceError(
                FailureKind.UPSTREAM_ERROR, trace_id, diagnostics=exc.diagnostics()
            ) from exc
        except EmptyCompletionError as exc:
            self.logger.warning("generate.empty_response", extra={"trace_id": trace_id})
            raise FactsServiceError(FailureKind.EMPTY_RESPONSE, trace_id) from exc
        except LLMError as exc:
            self.logger.error("generate.llm_error", extra={"trace_id": trace_id, "error": str(exc)})
            raise FactsServiceError(FailureKind.INTERNAL_ERROR, trace_id) from exc

    def _accept_output(self, text: str, trace_id: str) -> Dict[str, Any]:
        try:
            candidate = parse_model_output(text)
        except ExtractionFailure as exc:
            self.logger.warning("generate.invalid_output", extra={"trace_id": trace_id, "stage": "extract"})
            raise FactsServiceError(FailureKind.EXTRACTION_FAILURE, trace_id) from exc
        except InvalidJSON as exc:
            self.logger.warning("generate.invalid_output", extra={"trace_id": trace_id, "stage": "decode"})
            raise FactsServiceError(FailureKind.INVALID_JSON, trace_id) from exc

        issue = validate_batch(candidate)
        if issue is not None:
            self.logger.warning(
                "generate.invalid_output",
                extra={"trace_id": trace_id, "stage": "validate", **issue.as_log_fields()},
            )
            raise FactsServiceError(FailureKind.SCHEMA_VALIDATION_FAILURE, trace_id, issue=issue)

        batch = add_legacy_source_fields(candidate)
        self.logger.info("generate.success", extra={"trace_id": trace_id, "items": len(batch["items"])})
        return batch


# Global instance (initialized in main.py)
facts_service: FactsService | None = None


def get_facts_service() -> FactsService:
    """Get the global facts service instance."""
    if facts_service is None:
        raise RuntimeError("FactsService not initialized")
    return facts_service

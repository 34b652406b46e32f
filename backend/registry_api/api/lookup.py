import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from registry_api.core.metrics import LOOKUP_DURATION, LOOKUP_REQUESTS
from registry_api.db.session import get_db
from registry_api.db.store import RegistryStore
from registry_api.schemas.lookup import ErrorResponse, LookupQuery, LookupResponse
from registry_api.services.lookup_cache import LookupCache
from registry_api.services.lookup_service import LookupService

router = APIRouter()
logger = logging.getLogger(__name__)


def get_lookup_cache() -> LookupCache:
    return LookupCache.get_instance()


def get_lookup_service(
    db: AsyncSession = Depends(get_db),
    cache: LookupCache = Depends(get_lookup_cache),
) -> LookupService:
    return LookupService(RegistryStore(db), cache)


def _request_id() -> str:
    return f"req_{int(time.time() * 1000)}"


def _error(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.get(
    "/lookup",
    response_model=LookupResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def lookup(
    request: Request,
    domain: Optional[str] = None,
    trust_levels: Optional[str] = None,
    deployment_types: Optional[str] = None,
    max_results: Optional[str] = None,
    include_categories: Optional[str] = None,
    user_context: Optional[str] = None,
    service: LookupService = Depends(get_lookup_service),
):
    """Look up MCP servers relevant to a domain."""
    started = time.perf_counter()
    status_code = 500
    outcome = "error"

    raw = {
        "domain": domain,
        "trust_levels": trust_levels,
        "deployment_types": deployment_types,
        "max_results": max_results,
        "include_categories": include_categories,
        "user_context": user_context,
    }

    try:
        try:
            query = LookupQuery.model_validate({k: v for k, v in raw.items() if v is not None})
        except ValidationError as exc:
            first = exc.errors()[0]
            # Our own validators raise ValueError; report their text without pydantic's prefix
            message = str(first.get("ctx", {}).get("error") or first["msg"])
            status_code, outcome = 400, "invalid"
            return _error(
                400,
                ErrorResponse(
                    error="invalid_request",
                    message=message,
                    details={
                        "param": ".".join(str(part) for part in first["loc"]),
                        "code": first["type"],
                    },
                ),
            )

        result = await service.lookup_servers(query)

        if not result.matches:
            status_code, outcome = 404, "no_match"
            return _error(
                404,
                ErrorResponse(
                    error="no_matches",
                    message="No MCP servers found for this domain",
                    domain=query.domain,
                ),
            )

        status_code, outcome = 200, "match"
        return result

    except SQLAlchemyError:
        logger.exception(f"Database error during lookup for {domain}")
        return _error(
            500,
            ErrorResponse(
                error="database_error",
                message="An error occurred while querying the database",
                request_id=_request_id(),
            ),
        )
    except Exception:
        logger.exception(f"Unexpected error during lookup for {domain}")
        return _error(
            500,
            ErrorResponse(
                error="internal_error",
                message="An unexpected error occurred",
                request_id=_request_id(),
            ),
        )
    finally:
        duration = time.perf_counter() - started
        LOOKUP_REQUESTS.labels(outcome=outcome).inc()
        LOOKUP_DURATION.observe(duration)
        logger.info(
            f"{request.method} {request.url.path} domain={domain} status={status_code} "
            f"duration_ms={int(duration * 1000)}"
        )

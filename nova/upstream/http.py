"""Shared httpx plumbing for upstream calls.

Maps the three outcomes every upstream call can have onto the nova error
taxonomy: a 2xx response is returned, a non-2xx response becomes
UpstreamRejectionError (status and body verbatim), and no response at all
becomes TransportFailureError.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

import httpx

from nova.exceptions import TransportFailureError, UpstreamRejectionError
from nova.logger import Logger


@asynccontextmanager
async def upstream_client(
    client: Optional[httpx.AsyncClient], timeout: float
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a short-lived one closed on exit."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=timeout) as owned:
        yield owned


async def request_upstream(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    service: str,
    logger: Logger,
    **kwargs: Any,
) -> httpx.Response:
    """Send one request and return the response only if it was successful."""
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.TimeoutException as exc:
        logger.error("Upstream request timed out", service=service, url=url)
        raise TransportFailureError(f"{service} request timed out", service=service) from exc
    except httpx.HTTPError as exc:
        logger.error(
            "Upstream request failed",
            service=service,
            url=url,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        raise TransportFailureError(f"Could not reach {service}: {exc}", service=service) from exc

    if not response.is_success:
        logger.warning(
            "Upstream rejected request",
            service=service,
            url=url,
            status=response.status_code,
        )
        raise UpstreamRejectionError(response.status_code, response.text, service=service)

    return response

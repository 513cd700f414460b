"""
Outbound HTTP helper.

Every request AddonStreams makes to an addon instance goes through
``make_request`` so timeouts, headers and error reporting are uniform.
"""

import logging
from typing import Any, Mapping, Optional

import httpx

logger = logging.getLogger(__name__)


class RequestError(Exception):
    """Error during an outbound request."""

    def __init__(
        self,
        message: str,
        url: str,
        status_code: Optional[int] = None,
        is_timeout: bool = False,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.is_timeout = is_timeout
        self.original_error = original_error


async def make_request(
    url: str,
    *,
    method: str = "GET",
    timeout: Optional[int] = None,
    headers: Optional[Mapping[str, str]] = None,
    body: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> httpx.Response:
    """
    Perform an HTTP request and return the response.

    Args:
        url: Absolute URL to request
        method: HTTP method
        timeout: Timeout in milliseconds (None = httpx default)
        headers: Request headers
        body: Pre-serialized request body
        client: Shared client to use instead of a one-off client

    Returns:
        The httpx response (2xx only)

    Raises:
        RequestError: On invalid URLs, transport errors, timeouts and non-2xx responses
    """
    request_timeout: Any = httpx.USE_CLIENT_DEFAULT
    if timeout is not None:
        request_timeout = httpx.Timeout(timeout / 1000)

    logger.debug(f"{method} {url}")

    try:
        if client is not None:
            response = await client.request(
                method, url, headers=headers, content=body, timeout=request_timeout
            )
        else:
            async with httpx.AsyncClient() as one_off:
                response = await one_off.request(
                    method, url, headers=headers, content=body, timeout=request_timeout
                )
        response.raise_for_status()
        return response

    except httpx.TimeoutException as e:
        raise RequestError(
            f"Request timed out after {timeout}ms",
            url=url,
            is_timeout=True,
            original_error=e,
        ) from e
    except httpx.HTTPStatusError as e:
        raise RequestError(
            f"HTTP {e.response.status_code} {e.response.reason_phrase}",
            url=url,
            status_code=e.response.status_code,
            original_error=e,
        ) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise RequestError(
            f"{type(e).__name__}: {e}",
            url=url,
            original_error=e,
        ) from e

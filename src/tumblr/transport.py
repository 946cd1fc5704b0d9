"""HTTP transport for signed Tumblr requests."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import requests
from requests.structures import CaseInsensitiveDict

from src.tumblr.constants import DEFAULT_USER_AGENT
from src.tumblr.exceptions import TumblrClientError
from src.tumblr.signing import HttpMethod, SignedRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawResponse:
    """Status, headers and body of an HTTP response, as received."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str = ""

    def __post_init__(self) -> None:
        """Freeze the headers."""
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def header(self, name: str) -> str | None:
        """Look up a header case-insensitively.

        :param name: Header name.
        :returns: The header value, or None if absent.
        """
        return CaseInsensitiveDict(self.headers).get(name)


class Transport:
    """Sends signed requests over a shared ``requests.Session``.

    No retries are attempted and status codes are passed through untouched.
    Redirect following is decided per request, so one call can turn it off
    without affecting any other call made through the same session.
    """

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialise the transport.

        :param session: Optional session to send requests with. It is not modified.
        :param timeout: Request timeout in seconds, None for no timeout.
        """
        self.session = session or requests.Session()
        self.timeout = timeout

    def send(self, request: SignedRequest, *, allow_redirects: bool = True) -> RawResponse:
        """Send a signed request.

        :param request: The signed request.
        :param allow_redirects: Whether to follow redirects for this call only.
        :returns: The raw response.
        :raises TumblrClientError: If the request could not be completed.
        """
        params = list(request.params)
        logger.debug(
            f"Sending {request.method} request: url={request.url} "
            f"allow_redirects={allow_redirects}"
        )

        try:
            response = self.session.request(
                request.method.value,
                request.url,
                params=params if request.method == HttpMethod.GET else None,
                data=params if request.method == HttpMethod.POST else None,
                headers={"User-Agent": DEFAULT_USER_AGENT, **request.headers},
                allow_redirects=allow_redirects,
                timeout=self.timeout,
            )

        except requests.exceptions.Timeout as e:
            logger.exception(f"Tumblr API request timed out: {request.method} {request.url}")
            raise TumblrClientError(f"Tumblr API request timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            logger.exception(f"Tumblr API request error: {request.method} {request.url}")
            raise TumblrClientError(f"Tumblr API request failed: {e}") from e

        logger.debug(f"Received response: status={response.status_code} url={request.url}")
        return RawResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.text,
        )

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()

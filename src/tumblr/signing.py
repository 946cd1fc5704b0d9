"""OAuth 1.0a HMAC-SHA1 request signing.

Tumblr verifies every request signature server-side, so the canonical base
string and signing key have to match RFC 5849 exactly:

- values are percent-encoded with only the unreserved characters left alone;
- the URL loses its query string, and default ports and case in the scheme
  and host are normalised away;
- parameters are sorted by encoded key, then encoded value.

Requests without an access token are signed with the consumer pair only and
carry no ``oauth_token`` parameter.
"""

import base64
import hashlib
import hmac
import logging
import secrets
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any
from urllib.parse import parse_qsl, quote, unquote, urlsplit, urlunsplit

from src.tumblr.constants import OAUTH_SIGNATURE_METHOD, OAUTH_VERSION
from src.tumblr.credentials import Credentials

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"http": 80, "https": 443}


class HttpMethod(StrEnum):
    """HTTP verbs used by the Tumblr API."""

    GET = "GET"
    POST = "POST"


@dataclass(frozen=True)
class SignedRequest:
    """A request ready to be sent.

    ``params`` go in the query string for GET and in the form body for POST.
    The signature itself travels in the ``Authorization`` header.
    """

    method: HttpMethod
    url: str
    params: tuple[tuple[str, str], ...] = ()
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))


def to_text(value: Any) -> str:
    """Coerce a parameter value to the text sent on the wire.

    :param value: Parameter value of any type.
    :returns: Lower-case ``true``/``false`` for booleans, ``str()`` otherwise.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def percent_encode(value: str) -> str:
    """Percent-encode a value per RFC 3986.

    :param value: Text to encode.
    :returns: Encoded text with only ``A-Z a-z 0-9 - . _ ~`` left unescaped.
    """
    return quote(value, safe="~")


def normalise_url(url: str) -> str:
    """Build the base string URI for a request URL.

    :param url: Absolute request URL, possibly with a query string.
    :returns: URL with lower-case scheme and host, no default port, no query.
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()

    if parts.port is not None and parts.port != DEFAULT_PORTS.get(scheme):
        host = f"{host}:{parts.port}"

    return urlunsplit((scheme, host, parts.path or "/", "", ""))


def normalise_parameters(params: Iterable[tuple[str, str]]) -> str:
    """Encode, sort and join request parameters.

    :param params: Key/value pairs, including the ``oauth_*`` parameters.
    :returns: The normalised parameter string.
    """
    encoded = sorted((percent_encode(key), percent_encode(value)) for key, value in params)
    return "&".join(f"{key}={value}" for key, value in encoded)


def signature_base_string(
    method: str,
    url: str,
    params: Iterable[tuple[str, str]],
) -> str:
    """Build the signature base string.

    :param method: HTTP verb.
    :param url: Absolute request URL.
    :param params: All parameters covered by the signature.
    :returns: ``METHOD&encoded-url&encoded-params``.
    """
    return "&".join(
        (
            method.upper(),
            percent_encode(normalise_url(url)),
            percent_encode(normalise_parameters(params)),
        )
    )


def parse_base_string(base_string: str) -> tuple[str, str, list[tuple[str, str]]]:
    """Split a signature base string back into its components.

    :param base_string: Output of :func:`signature_base_string`.
    :returns: The verb, the normalised URL and the decoded parameter pairs.
    :raises ValueError: If the string does not have three components.
    """
    parts = base_string.split("&")
    if len(parts) != 3:
        raise ValueError(f"Malformed signature base string: {base_string!r}")

    method, encoded_url, encoded_params = parts
    params: list[tuple[str, str]] = []

    for pair in unquote(encoded_params).split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        params.append((unquote(key), unquote(value)))

    return method, unquote(encoded_url), params


def signing_key(consumer_secret: str, token_secret: str | None = None) -> str:
    """Build the HMAC key from the consumer and token secrets.

    :param consumer_secret: OAuth consumer secret.
    :param token_secret: OAuth token secret, empty in unauthenticated mode.
    :returns: ``encoded-consumer-secret&encoded-token-secret``.
    """
    return f"{percent_encode(consumer_secret)}&{percent_encode(token_secret or '')}"


def hmac_sha1_signature(base_string: str, key: str) -> str:
    """Compute the base64 HMAC-SHA1 digest of a base string.

    :param base_string: Signature base string.
    :param key: Signing key.
    :returns: Base64 encoded signature.
    """
    digest = hmac.new(key.encode("utf-8"), base_string.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def authorization_header(oauth_params: Iterable[tuple[str, str]]) -> str:
    """Render the ``Authorization`` header value.

    :param oauth_params: The ``oauth_*`` parameters, signature included.
    :returns: ``OAuth key="value", ...`` with encoded values.
    """
    rendered = ", ".join(
        f'{percent_encode(key)}="{percent_encode(value)}"' for key, value in sorted(oauth_params)
    )
    return f"OAuth {rendered}"


class RequestSigner:
    """Signs requests with a set of credentials.

    The signer reads the credentials on every call, so a token assigned after
    construction is picked up by the next request.
    """

    def __init__(self, credentials: Credentials) -> None:
        """Initialise the signer.

        :param credentials: Credentials used as keying material.
        """
        self._credentials = credentials

    def oauth_parameters(self, *, nonce: str, timestamp: int) -> list[tuple[str, str]]:
        """Build the protocol parameters for one request.

        :param nonce: Unique value for this request.
        :param timestamp: Seconds since the epoch.
        :returns: The ``oauth_*`` pairs, without the signature.
        """
        oauth_params = [
            ("oauth_consumer_key", self._credentials.consumer_key),
            ("oauth_nonce", nonce),
            ("oauth_signature_method", OAUTH_SIGNATURE_METHOD),
            ("oauth_timestamp", str(timestamp)),
            ("oauth_version", OAUTH_VERSION),
        ]
        if self._credentials.has_token:
            oauth_params.append(("oauth_token", self._credentials.token or ""))
        return oauth_params

    def sign(
        self,
        method: str,
        url: str,
        params: Mapping[str, Any] | None = None,
        *,
        nonce: str | None = None,
        timestamp: int | None = None,
    ) -> SignedRequest:
        """Sign a request.

        Supplying ``nonce`` and ``timestamp`` makes the result deterministic.

        :param method: HTTP verb, GET or POST.
        :param url: Absolute request URL.
        :param params: Query (GET) or body (POST) parameters. None values are omitted.
        :param nonce: Optional nonce, generated when omitted.
        :param timestamp: Optional timestamp, the current time when omitted.
        :returns: The signed request.
        :raises ValueError: If the verb is not GET or POST.
        """
        http_method = HttpMethod(method.upper())

        parts = urlsplit(url)
        request_params = parse_qsl(parts.query, keep_blank_values=True)
        # None means "not given", the parameter is left out entirely
        request_params.extend(
            (key, to_text(value)) for key, value in (params or {}).items() if value is not None
        )
        request_url = urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))

        oauth_params = self.oauth_parameters(
            nonce=nonce if nonce is not None else secrets.token_hex(16),
            timestamp=timestamp if timestamp is not None else int(time.time()),
        )

        base_string = signature_base_string(
            http_method, request_url, [*request_params, *oauth_params]
        )
        key = signing_key(self._credentials.consumer_secret, self._credentials.token_secret)
        oauth_params.append(("oauth_signature", hmac_sha1_signature(base_string, key)))

        logger.debug(
            f"Signed request: method={http_method} url={request_url} "
            f"authenticated={self._credentials.has_token}"
        )
        return SignedRequest(
            method=http_method,
            url=request_url,
            params=tuple(request_params),
            headers={"Authorization": authorization_header(oauth_params)},
        )

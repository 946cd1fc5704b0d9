"""Consumer and access token credentials for request signing."""

import logging

logger = logging.getLogger(__name__)


class Credentials:
    """Holds the consumer key pair and the optional access token pair.

    The consumer key and secret are fixed at construction. The token pair can
    be assigned after construction through :meth:`set_token`; assigning it
    again simply overwrites the previous pair.
    """

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        token: str | None = None,
        token_secret: str | None = None,
    ) -> None:
        """Initialise the credentials.

        :param consumer_key: OAuth consumer key, also sent as ``api_key``.
        :param consumer_secret: OAuth consumer secret.
        :param token: Optional OAuth access token.
        :param token_secret: Optional OAuth access token secret.
        """
        self._consumer_key = consumer_key
        self._consumer_secret = consumer_secret
        self._token: str | None = None
        self._token_secret: str | None = None

        if token is not None:
            self.set_token(token, token_secret or "")

    def __repr__(self) -> str:
        """Return repr string without secrets."""
        return f"Credentials(consumer_key={self._consumer_key!r}, has_token={self.has_token})"

    @property
    def consumer_key(self) -> str:
        """Get the consumer key."""
        return self._consumer_key

    @property
    def consumer_secret(self) -> str:
        """Get the consumer secret."""
        return self._consumer_secret

    @property
    def token(self) -> str | None:
        """Get the access token, if one has been set."""
        return self._token

    @property
    def token_secret(self) -> str | None:
        """Get the access token secret, if one has been set."""
        return self._token_secret

    @property
    def has_token(self) -> bool:
        """Check whether requests will be signed in authenticated mode.

        :returns: True if an access token has been assigned.
        """
        return self._token is not None

    def set_token(self, token: str, token_secret: str) -> None:
        """Assign the access token pair.

        :param token: OAuth access token.
        :param token_secret: OAuth access token secret.
        """
        self._token = token
        self._token_secret = token_secret
        logger.debug("Access token assigned to credentials")

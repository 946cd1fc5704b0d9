"""Classify raw responses and decode success envelopes."""

from __future__ import annotations

import json
import logging
import weakref
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from src.tumblr.constants import SUCCESS_STATUS_CODES
from src.tumblr.exceptions import TumblrResponseError
from src.tumblr.models import (
    Blog,
    BlogList,
    Empty,
    Entity,
    LikedPostList,
    Payload,
    Post,
    PostList,
    ResponseEnvelope,
    SingleEntity,
    User,
    UserList,
    envelope_meta,
)
from src.tumblr.transport import RawResponse

if TYPE_CHECKING:
    from src.tumblr.client import TumblrClient

logger = logging.getLogger(__name__)

# Checked in order, a posts response also carries a "blog" object
LIST_PAYLOADS: tuple[tuple[str, type[Entity], Any], ...] = (
    ("posts", Post, PostList),
    ("liked_posts", Post, LikedPostList),
    ("blogs", Blog, BlogList),
    ("users", User, UserList),
)

TOTAL_KEYS = ("total_posts", "liked_count", "total_blogs", "total_users")


def is_success(status_code: int) -> bool:
    """Check whether a status code routes to the success state.

    :param status_code: HTTP status code.
    :returns: True for 200 and 201.
    """
    return status_code in SUCCESS_STATUS_CODES


def parse_payload(value: Any) -> Payload:
    """Tag the ``response`` value of an envelope with its shape.

    :param value: Decoded ``response`` value.
    :returns: The tagged payload.
    :raises pydantic.ValidationError: If an entity does not match its model.
    """
    if not value:
        return Empty()

    if isinstance(value, list):
        return PostList(tuple(Post.model_validate(item) for item in value))

    if not isinstance(value, dict):
        return Empty()

    for key, model, container in LIST_PAYLOADS:
        items = value.get(key)
        if isinstance(items, list):
            return container(tuple(model.model_validate(item) for item in items))

    if isinstance(value.get("user"), dict):
        return SingleEntity(User.model_validate(value["user"]))

    if isinstance(value.get("blog"), dict):
        return SingleEntity(Blog.model_validate(value["blog"]))

    return SingleEntity(Post.model_validate(value))


def _payload_entities(payload: Payload) -> list[Entity]:
    if isinstance(payload, SingleEntity):
        return [payload.entity]
    if isinstance(payload, Empty):
        return []
    return list(payload.items)


def build_envelope(data: dict[str, Any], client: TumblrClient | None = None) -> ResponseEnvelope:
    """Decode a response body into an envelope bound to a client.

    :param data: Decoded JSON body.
    :param client: Client to attach to the envelope and its entities.
    :returns: The envelope.
    :raises pydantic.ValidationError: If the body does not match the models.
    """
    value = data.get("response")
    payload = parse_payload(value)

    total = None
    context_blog = None
    if isinstance(value, dict):
        total = next((value[key] for key in TOTAL_KEYS if isinstance(value.get(key), int)), None)
        if not isinstance(payload, SingleEntity) and isinstance(value.get("blog"), dict):
            context_blog = Blog.model_validate(value["blog"])

    if client is not None:
        for entity in _payload_entities(payload):
            entity.bind(client)
        if context_blog is not None:
            context_blog.bind(client)

    return ResponseEnvelope(
        meta=envelope_meta(data),
        payload=payload,
        total=total,
        context_blog=context_blog,
        raw=value,
        _client_ref=weakref.ref(client) if client is not None else None,
    )


def resolve(raw: RawResponse, client: TumblrClient | None = None) -> ResponseEnvelope | None:
    """Resolve a raw response into an envelope or a failure.

    A success status with a body that cannot be decoded yields None rather
    than an exception.

    :param raw: Raw response from the transport.
    :param client: Client to attach to the decoded entities.
    :returns: The envelope, or None if the success body could not be decoded.
    :raises TumblrResponseError: If the status is not 200 or 201.
    """
    if not is_success(raw.status_code):
        logger.warning(f"Tumblr API returned error status: status={raw.status_code}")
        raise TumblrResponseError(raw.status_code, raw.body)

    try:
        data = json.loads(raw.body)
    except (ValueError, RecursionError):
        logger.warning(f"Could not decode success body as JSON: status={raw.status_code}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Success body is not a JSON object: type={type(data).__name__}")
        return None

    try:
        return build_envelope(data, client)
    except ValidationError as e:
        logger.warning(f"Success body does not match the envelope shape: {e}")
        return None

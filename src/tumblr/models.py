"""Typed results for Tumblr API responses.

A success envelope wraps one of several payload shapes. Each shape is its own
frozen dataclass so callers can match on the payload directly, or use the
accessors on :class:`ResponseEnvelope` which return ``None`` or an empty list
when a different shape was returned.
"""

from __future__ import annotations

import weakref
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from src.tumblr.exceptions import TumblrClientError

if TYPE_CHECKING:
    from src.tumblr.client import TumblrClient


class Entity(BaseModel):
    """Base class for decoded entities that can issue further API calls.

    The entity keeps a weak reference to the client that fetched it, so it
    never extends the client's lifetime.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    _client_ref: Any = PrivateAttr(default=None)

    def bind(self, client: TumblrClient) -> None:
        """Attach the originating client.

        :param client: Client the entity was fetched with.
        """
        self._client_ref = weakref.ref(client)

    @property
    def client(self) -> TumblrClient:
        """Get the originating client.

        :returns: The client.
        :raises TumblrClientError: If no client is attached or it was collected.
        """
        client = self._client_ref() if self._client_ref is not None else None
        if client is None:
            raise TumblrClientError(f"{type(self).__name__} is not bound to a live client")
        return client


class Post(Entity):
    """A post on a blog."""

    id: int | None = Field(None, description="Post ID")
    blog_name: str | None = Field(None, description="Name of the blog the post is on")
    type: str | None = Field(None, description="Post type (text, photo, quote, ...)")
    reblog_key: str | None = Field(None, description="Key required to reblog or like")
    post_url: str | None = Field(None, description="Public URL of the post")
    timestamp: int | None = Field(None, description="Publication time as a Unix timestamp")
    state: str | None = Field(None, description="published, queued, draft or private")
    tags: list[str] = Field(default_factory=list)
    note_count: int | None = Field(None, description="Number of notes")

    def reblog(self, blog_name: str, **options: Any) -> Post | None:
        """Reblog this post onto a blog.

        :param blog_name: Blog to reblog onto.
        :param options: Additional reblog options, e.g. ``comment``.
        :returns: The created post.
        """
        return self.client.post_reblog(blog_name, self.id, self.reblog_key, **options)

    def like(self) -> None:
        """Like this post as the authenticated user."""
        self.client.like(self.id, self.reblog_key)

    def unlike(self) -> None:
        """Unlike this post as the authenticated user."""
        self.client.unlike(self.id, self.reblog_key)

    def delete(self) -> None:
        """Delete this post from its blog."""
        self.client.post_delete(self.blog_name, self.id)


class Blog(Entity):
    """A blog.

    Count fields are renamed so they do not clash with the fetch methods.
    """

    name: str | None = Field(None, description="Short blog name")
    title: str | None = Field(None, description="Blog title")
    url: str | None = Field(None, description="Blog URL")
    description: str | None = Field(None, description="Blog description")
    updated: int | None = Field(None, description="Last update as a Unix timestamp")
    post_count: int | None = Field(None, alias="posts", description="Number of posts")
    like_count: int | None = Field(None, alias="likes", description="Number of public likes")
    follower_count: int | None = Field(None, alias="followers", description="Follower count")
    primary: bool | None = Field(None, description="Whether this is the user's primary blog")

    @property
    def identifier(self) -> str:
        """Get the identifier to address this blog with."""
        return self.name or ""

    def posts(self, **options: Any) -> list[Post]:
        """Fetch this blog's posts."""
        return self.client.blog_posts(self.identifier, **options)

    def queued_posts(self, **options: Any) -> list[Post]:
        """Fetch this blog's queued posts."""
        return self.client.blog_queued_posts(self.identifier, **options)

    def draft_posts(self, **options: Any) -> list[Post]:
        """Fetch this blog's draft posts."""
        return self.client.blog_draft_posts(self.identifier, **options)

    def submissions(self, **options: Any) -> list[Post]:
        """Fetch this blog's submissions."""
        return self.client.blog_submissions(self.identifier, **options)

    def likes(self, **options: Any) -> list[Post]:
        """Fetch this blog's public likes."""
        return self.client.blog_likes(self.identifier, **options)

    def followers(self, **options: Any) -> list[User]:
        """Fetch this blog's followers."""
        return self.client.blog_followers(self.identifier, **options)

    def avatar(self, size: int | None = None) -> str:
        """Fetch the URL of this blog's avatar."""
        return self.client.blog_avatar(self.identifier, size)

    def follow(self) -> None:
        """Follow this blog as the authenticated user."""
        self.client.follow(self.identifier)

    def unfollow(self) -> None:
        """Unfollow this blog as the authenticated user."""
        self.client.unfollow(self.identifier)


class User(Entity):
    """A user, either the authenticated user or a blog follower.

    ``following`` is a count for the authenticated user and a flag for
    followers.
    """

    name: str | None = Field(None, description="User name")
    url: str | None = Field(None, description="Primary blog URL")
    updated: int | None = Field(None, description="Last update as a Unix timestamp")
    following: bool | int | None = Field(None, description="Following count or flag")
    like_count: int | None = Field(None, alias="likes", description="Number of likes")
    default_post_format: str | None = Field(None, description="html, markdown or raw")
    blogs: list[Blog] = Field(default_factory=list)

    def bind(self, client: TumblrClient) -> None:
        """Attach the originating client to the user and their blogs.

        :param client: Client the user was fetched with.
        """
        super().bind(client)
        for blog in self.blogs:
            blog.bind(client)


class Meta(BaseModel):
    """Status block of a response envelope."""

    status: int | None = None
    msg: str | None = None


class PayloadKind(StrEnum):
    """Shapes a response payload can take."""

    SINGLE_ENTITY = "single_entity"
    POST_LIST = "post_list"
    BLOG_LIST = "blog_list"
    USER_LIST = "user_list"
    LIKED_POST_LIST = "liked_post_list"
    EMPTY = "empty"


@dataclass(frozen=True)
class SingleEntity:
    """A single user, blog or post."""

    entity: User | Blog | Post
    kind: ClassVar[PayloadKind] = PayloadKind.SINGLE_ENTITY


@dataclass(frozen=True)
class PostList:
    """A list of posts."""

    items: tuple[Post, ...] = ()
    kind: ClassVar[PayloadKind] = PayloadKind.POST_LIST


@dataclass(frozen=True)
class BlogList:
    """A list of blogs."""

    items: tuple[Blog, ...] = ()
    kind: ClassVar[PayloadKind] = PayloadKind.BLOG_LIST


@dataclass(frozen=True)
class UserList:
    """A list of users."""

    items: tuple[User, ...] = ()
    kind: ClassVar[PayloadKind] = PayloadKind.USER_LIST


@dataclass(frozen=True)
class LikedPostList:
    """A list of liked posts."""

    items: tuple[Post, ...] = ()
    kind: ClassVar[PayloadKind] = PayloadKind.LIKED_POST_LIST


@dataclass(frozen=True)
class Empty:
    """No payload, as returned by write operations such as follow."""

    kind: ClassVar[PayloadKind] = PayloadKind.EMPTY


Payload = SingleEntity | PostList | BlogList | UserList | LikedPostList | Empty


@dataclass(frozen=True)
class ResponseEnvelope:
    """A decoded success response.

    :param meta: The ``meta`` block.
    :param payload: The tagged payload.
    :param total: Total count reported alongside a list, if any.
    :param context_blog: Blog returned next to a post list, if any.
    :param raw: The decoded ``response`` value, untouched.
    """

    meta: Meta
    payload: Payload
    total: int | None = None
    context_blog: Blog | None = None
    raw: Any = None
    _client_ref: weakref.ReferenceType[TumblrClient] | None = field(
        default=None, repr=False, compare=False
    )

    @property
    def client(self) -> TumblrClient | None:
        """Get the client that fetched this envelope, if it is still alive."""
        return self._client_ref() if self._client_ref is not None else None

    @property
    def kind(self) -> PayloadKind:
        """Get the payload shape."""
        return self.payload.kind

    def _single(self, entity_type: type[Entity]) -> Any:
        if isinstance(self.payload, SingleEntity) and isinstance(self.payload.entity, entity_type):
            return self.payload.entity
        return None

    @property
    def user(self) -> User | None:
        """Get the single user, or None."""
        return self._single(User)

    @property
    def blog(self) -> Blog | None:
        """Get the single blog, or None."""
        return self._single(Blog)

    @property
    def post(self) -> Post | None:
        """Get the single post, or None."""
        return self._single(Post)

    @property
    def posts(self) -> list[Post]:
        """Get the post list, empty if another shape was returned."""
        return list(self.payload.items) if isinstance(self.payload, PostList) else []

    @property
    def blogs(self) -> list[Blog]:
        """Get the blog list, empty if another shape was returned."""
        return list(self.payload.items) if isinstance(self.payload, BlogList) else []

    @property
    def users(self) -> list[User]:
        """Get the user list, empty if another shape was returned."""
        return list(self.payload.items) if isinstance(self.payload, UserList) else []

    @property
    def liked_posts(self) -> list[Post]:
        """Get the liked post list, empty if another shape was returned."""
        return list(self.payload.items) if isinstance(self.payload, LikedPostList) else []


def envelope_meta(data: Mapping[str, Any]) -> Meta:
    """Decode the ``meta`` block of an envelope.

    :param data: The decoded response body.
    :returns: The meta block, empty when absent.
    """
    meta = data.get("meta")
    return Meta.model_validate(meta) if isinstance(meta, Mapping) else Meta()

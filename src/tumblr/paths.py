"""Resource path helpers for blog endpoints."""

from src.tumblr.constants import DEFAULT_BLOG_HOST_SUFFIX


def blog_url(blog_name: str | None) -> str:
    """Qualify a blog identifier with a host name.

    Identifiers that already contain a domain separator are used verbatim,
    bare names get the default host suffix appended.

    :param blog_name: Blog name or host name, e.g. ``staff`` or ``example.com``.
    :returns: The host-qualified blog identifier.
    """
    name = blog_name or ""
    return name if "." in name else f"{name}{DEFAULT_BLOG_HOST_SUFFIX}"


def blog_path(blog_name: str | None, suffix: str) -> str:
    """Build the API path for a blog resource.

    :param blog_name: Blog name or host name.
    :param suffix: Operation suffix, e.g. ``/info`` or ``/posts/queue``.
    :returns: Path of the form ``/blog/<host>/<suffix>``.
    """
    return f"/blog/{blog_url(blog_name)}{suffix}"

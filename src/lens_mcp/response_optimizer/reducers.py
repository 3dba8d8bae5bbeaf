"""Per-entity projections that keep only the semantically useful fields.

Every reducer is pure and tolerant: missing fields are omitted, nothing raises.
Reducers also accept their own output, so reducing twice gives the same result.
"""

from collections.abc import Callable, Mapping
from typing import Any

from lens_mcp.response_optimizer.models import EntityKind

POST_TYPES = ("post", "comment", "quote", "mirror")

# Untagged entities are recognised by shape; these keys only occur on posts
POST_SHAPE_KEYS = ("commentOn", "quoteOf", "root", "repostOf", "author")

# (output key, candidate input keys) in priority order
POST_STAT_FIELDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("reactions", ("reactions", "upvotes")),
    ("reposts", ("reposts", "mirrors")),
    ("comments", ("comments",)),
    ("quotes", ("quotes",)),
)

ACCOUNT_STAT_FIELDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("followers", ("followers",)),
    ("following", ("following",)),
    ("posts", ("posts", "publications")),
)


def _identity(entity: Mapping[str, Any], key: str) -> str | None:
    """Return an identity field (``id`` or ``address``) when it is a non-empty string."""
    value = entity.get(key)
    return value if isinstance(value, str) and value else None


def _ref_id(value: Any) -> str | None:
    """Return the id of a referenced post, given either the object or a bare id."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, Mapping):
        ref = value.get("id")
        return ref if isinstance(ref, str) and ref else None
    return None


def _local_name(username: Any) -> str | None:
    """Collapse a username object to its local name."""
    if isinstance(username, str):
        return username or None
    if isinstance(username, Mapping):
        name = username.get("localName") or username.get("value")
        return name if isinstance(name, str) and name else None
    return None


def _post_content(post: Mapping[str, Any]) -> str | None:
    metadata = post.get("metadata")
    if isinstance(metadata, Mapping):
        content = metadata.get("content")
        if isinstance(content, str) and content:
            return content
    content = post.get("content")
    if isinstance(content, str) and content:
        return content
    return None


def _pick_stats(
    stats: Mapping[str, Any], fields: tuple[tuple[str, tuple[str, ...]], ...], keep_zero: bool
) -> dict[str, Any]:
    picked: dict[str, Any] = {}
    for out_key, candidates in fields:
        for candidate in candidates:
            value = stats.get(candidate)
            if value is None or isinstance(value, bool):
                continue
            if not keep_zero and value == 0:
                continue
            picked[out_key] = value
            break
    return picked


def _root_id(post: Mapping[str, Any]) -> str | None:
    """Id of the post this one mirrors, from ``root`` or a repost's ``repostOf``."""
    return _ref_id(post.get("root")) or _ref_id(post.get("repostOf"))


def post_type(post: Mapping[str, Any]) -> str:
    """
    Classify a post as a comment, quote, mirror or original post.

    Args:
        post: Post entity, raw or already reduced

    Returns:
        One of "comment", "quote", "mirror" or "post"
    """
    if _ref_id(post.get("commentOn")):
        return "comment"
    if _ref_id(post.get("quoteOf")):
        return "quote"
    root_id = _root_id(post)
    if root_id and root_id != post.get("id"):
        return "mirror"
    return "post"


def entity_kind(entity: Any) -> EntityKind:
    """
    Determine which reducer applies to an entity.

    A ``Post`` or ``Account`` tag wins when the entity carries its identity
    field as a string. Everything else is matched by shape, so reduced entities (which
    carry no tag) and pruned ones are classified the same way again.
    """
    if not isinstance(entity, Mapping):
        return EntityKind.OPAQUE

    typename = entity.get("__typename")
    if typename == EntityKind.POST.value and _identity(entity, "id"):
        return EntityKind.POST
    if typename == EntityKind.ACCOUNT.value and _identity(entity, "address"):
        return EntityKind.ACCOUNT

    if _identity(entity, "id") and (
        entity.get("type") in POST_TYPES
        or any(key in entity for key in POST_SHAPE_KEYS)
        or _post_content(entity) is not None
    ):
        return EntityKind.POST

    if _identity(entity, "address") and _local_name(entity.get("username")) is not None:
        return EntityKind.ACCOUNT

    return EntityKind.OPAQUE


def reduce_post(post: Mapping[str, Any]) -> dict[str, Any]:
    """Project a post to id, author, content, counters and reference ids."""
    reduced: dict[str, Any] = {"id": post.get("id")}

    author = post.get("author")
    if isinstance(author, Mapping):
        reduced_author: dict[str, Any] = {}
        author_address = _identity(author, "address")
        if author_address:
            reduced_author["address"] = author_address
        username = _local_name(author.get("username"))
        if username:
            reduced_author["username"] = username
        if reduced_author:
            reduced["author"] = reduced_author

    content = _post_content(post)
    if content:
        reduced["content"] = content

    stats = post.get("stats")
    if isinstance(stats, Mapping):
        reduced_stats = _pick_stats(stats, POST_STAT_FIELDS, keep_zero=False)
        if reduced_stats:
            reduced["stats"] = reduced_stats

    comment_on = _ref_id(post.get("commentOn"))
    if comment_on:
        reduced["commentOn"] = comment_on
    quote_of = _ref_id(post.get("quoteOf"))
    if quote_of:
        reduced["quoteOf"] = quote_of
    root = _root_id(post)
    if root and root != post.get("id"):
        reduced["root"] = root

    reduced["type"] = post_type(post)
    return reduced


def reduce_account(account: Mapping[str, Any]) -> dict[str, Any]:
    """Project an account to address, username, name/bio and follow counters."""
    reduced: dict[str, Any] = {}
    address = _identity(account, "address")
    if address:
        reduced["address"] = address

    username = _local_name(account.get("username"))
    if username:
        reduced["username"] = username

    metadata = account.get("metadata")
    if isinstance(metadata, Mapping):
        reduced_metadata = {
            key: metadata[key]
            for key in ("name", "bio")
            if isinstance(metadata.get(key), str) and metadata[key]
        }
        if reduced_metadata:
            reduced["metadata"] = reduced_metadata

    stats = account.get("stats")
    if isinstance(stats, Mapping):
        # accountStats nests counters under graphFollowStats and feedStats
        flat: dict[str, Any] = dict(stats)
        for nested in ("graphFollowStats", "feedStats"):
            if isinstance(stats.get(nested), Mapping):
                flat = {**stats[nested], **flat}
        reduced_stats = _pick_stats(flat, ACCOUNT_STAT_FIELDS, keep_zero=True)
        if reduced_stats:
            reduced["stats"] = reduced_stats

    return reduced


ENTITY_REDUCERS: dict[EntityKind, Callable[[Mapping[str, Any]], dict[str, Any]]] = {
    EntityKind.POST: reduce_post,
    EntityKind.ACCOUNT: reduce_account,
}


def reduce_entity(entity: Any) -> Any:
    """
    Reduce one upstream entity to its minimal semantic projection.

    Posts and accounts use their dedicated reducers; every other shape goes
    through the generic structure pruning.

    Args:
        entity: One entity as returned by the Lens API

    Returns:
        The projected entity (a new object; the input is never mutated)
    """
    reducer = ENTITY_REDUCERS.get(entity_kind(entity))
    if reducer is None:
        from lens_mcp.response_optimizer.structure_optimizer import prune_structure

        return prune_structure(entity)
    return reducer(entity)

"""Template based caption generation.

Templates are plain strings with ``{variable}`` placeholders. Substitution is
a single pass over the template: a resolved value that itself contains braces
is copied verbatim and never scanned again.

The four platforms split into two shapes. Feed captions (``imvu_feed`` and
``ig_feed``) describe the whole stream in one post, while ``request`` and
``end_stream`` messages address a single creator and are rendered once per
line item.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping

from .errors import UnknownPlatform
from .models import LineItem, OrganizationProfile, StreamRecord

IMVU_FEED = "imvu_feed"
IG_FEED = "ig_feed"
REQUEST = "request"
END_STREAM = "end_stream"

PLATFORMS: dict[str, str] = {
    IMVU_FEED: "IMVU Feed",
    IG_FEED: "Instagram Feed",
    REQUEST: "Request Message",
    END_STREAM: "End Stream Message",
}

FEED_PLATFORMS = frozenset({IMVU_FEED, IG_FEED})

DEFAULT_TEMPLATES: dict[str, str] = {
    IMVU_FEED: (
        "⚜️{agency_name}⚜️ present Shop Stream @{creator_name}\n\n"
        "❤️ Product name(s): {item_names}\n"
        "❤️ Product ID(s): {product_ids}\n"
        "❤️ Shop ID: {creator_shop_id}"
    ),
    IG_FEED: (
        "{agency_name} present Shop Stream Creator {creator_name}\n\n"
        "❤️ Product name(s): {item_names}\n"
        "❤️ Product ID(s): {product_ids}\n"
        "❤️ Shop ID: {creator_shop_id}\n"
        "❤️ {agency_ig_handle}\n\n"
        "#imvu #creator #{agency_hashtag} #imvumodelagency #imvustreamer "
        "#imvufashion #imvushop #imvustyle"
    ),
    REQUEST: (
        "Hi @{creator_name}! I'd love to showcase {item_name} in my next "
        "stream. Product ID: {product_id}"
    ),
    END_STREAM: (
        "Thank you for watching! Don't forget to check out {item_name} by "
        "@{creator_name} - {product_id}"
    ),
}

# Substituted when the resolved value is empty; any other variable becomes "".
FALLBACKS: dict[str, str] = {
    "item_name": "Item",
    "creator_name": "Creator",
    "agency_name": "Agency",
}

CAPTION_SEPARATOR = "\n\n---\n\n"

_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


def _snake(name: str) -> str:
    return re.sub(r"\s+", "_", name.strip())


def _agency_ig_handle(record: StreamRecord, item: LineItem | None) -> str:
    if not record.organization_name:
        return "@agency"
    return f"@{_snake(record.organization_name).lower()}_agency"


def _agency_hashtag(record: StreamRecord, item: LineItem | None) -> str:
    if not record.organization_name:
        return "AGENCY"
    return f"{_snake(record.organization_name).upper()}_MODELING_AGENCY"


_Resolver = Callable[[StreamRecord, LineItem | None], str | None]

VARIABLES: dict[str, _Resolver] = {
    # item scoped
    "item_name": lambda r, i: i.name if i else None,
    "creator_name": lambda r, i: i.creator_name if i else None,
    "creator_shop_id": lambda r, i: i.creator_id if i else None,
    "product_id": lambda r, i: i.external_id if i else None,
    # record scoped
    "agency_name": lambda r, i: r.organization_name,
    "stream_type": lambda r, i: r.category.value,
    "due_date": lambda r, i: r.due_at.date().isoformat(),
    "agency_ig_handle": _agency_ig_handle,
    "agency_hashtag": _agency_hashtag,
    # aggregates
    "item_names": lambda r, i: ", ".join(it.name for it in r.items),
    "product_ids": lambda r, i: ", ".join(it.external_id or "" for it in r.items),
}


def resolve_variable(name: str, record: StreamRecord, item: LineItem | None = None) -> str:
    """Value for ``{name}``, applying the fallback table for empty values."""
    resolver = VARIABLES.get(name)
    value = resolver(record, item) if resolver else None
    if not value:
        return FALLBACKS.get(name, "")
    return value


def render(template: str, record: StreamRecord, item: LineItem | None = None) -> str:
    """Substitute every ``{variable}`` in ``template``.

    Item scoped variables come from ``item``, or from the record's first item
    when no item is given.
    """
    if item is None and record.items:
        item = record.items[0]
    return _PLACEHOLDER.sub(lambda m: resolve_variable(m.group(1), record, item), template)


def resolve_template(
    platform_key: str, organization: OrganizationProfile | None = None
) -> str:
    if platform_key not in PLATFORMS:
        raise UnknownPlatform(f"Unknown platform `{platform_key}`.")
    if organization is not None:
        custom = organization.templates.get(platform_key)
        if custom:
            return custom
    return DEFAULT_TEMPLATES[platform_key]


def generate_for_platform(
    platform_key: str,
    record: StreamRecord,
    organization: OrganizationProfile | None = None,
) -> str | dict[str, str]:
    """Render captions for ``record`` on ``platform_key``.

    Feed platforms return one string covering every item. The per-creator
    platforms return a mapping of item id to that item's message, in item
    order.
    """
    template = resolve_template(platform_key, organization)
    if platform_key in FEED_PLATFORMS:
        return render(template, record)
    return {item.id: render(template, record, item) for item in record.items}


def join_captions(captions: str | Mapping[str, str]) -> str:
    """Flatten a generation result into one copyable block of text."""
    if isinstance(captions, str):
        return captions
    return CAPTION_SEPARATOR.join(captions.values())


__all__ = [
    "CAPTION_SEPARATOR",
    "DEFAULT_TEMPLATES",
    "END_STREAM",
    "FEED_PLATFORMS",
    "IG_FEED",
    "IMVU_FEED",
    "PLATFORMS",
    "REQUEST",
    "generate_for_platform",
    "join_captions",
    "render",
    "resolve_template",
    "resolve_variable",
]

"""Helpers for world element tags of the form ``<namespace>-<name>``."""

from __future__ import annotations

import re

CONTRACT_NAME_SEPARATOR = "::"
TAG_SEPARATOR = "-"
SELECTOR_CHUNK_SIZE = 8

_IDENTIFIER = re.compile(r"[a-zA-Z0-9_]+")


def capitalize(s: str) -> str:
    """Upper-case the first character and keep the rest unchanged."""
    return s[:1].upper() + s[1:]


def get_name_from_tag(tag: str) -> str:
    """Return the part of the tag after the last separator."""
    return tag.split(TAG_SEPARATOR)[-1]


def get_namespace_from_tag(tag: str) -> str:
    """Return the part of the tag before the first separator."""
    return tag.split(TAG_SEPARATOR)[0]


def get_tag(namespace: str, name: str) -> str:
    """Join a namespace and a name into a tag."""
    return f"{namespace}{TAG_SEPARATOR}{name}"


def split_tag(tag: str) -> tuple[str, str]:
    """Return ``(namespace, name)`` from a tag; raise ``ValueError`` if malformed."""
    parts = tag.split(TAG_SEPARATOR)
    if len(parts) != 2:
        raise ValueError(
            f"Unexpected tag. Expected format: <NAMESPACE>{TAG_SEPARATOR}<NAME> or <NAME>"
        )
    return parts[0], parts[1]


def is_valid_tag(tag: str) -> bool:
    """Tell whether the tag has two non-empty identifier parts."""
    try:
        namespace, name = split_tag(tag)
    except ValueError:
        return False
    return bool(_IDENTIFIER.fullmatch(namespace) and _IDENTIFIER.fullmatch(name))


def ensure_namespace(tag: str, default_namespace: str) -> str:
    """Prefix ``default_namespace`` to the tag if it has no namespace."""
    if TAG_SEPARATOR in tag:
        return tag
    return get_tag(default_namespace, tag)


def get_tag_from_filename(filename: str) -> str:
    """Recover the tag from a ``<namespace>-<name>-<selector>`` filename."""
    parts = filename.split(TAG_SEPARATOR)
    if len(parts) != 3:
        raise ValueError(
            "Unexpected filename. Expected format: "
            f"<NAMESPACE>{TAG_SEPARATOR}<NAME>{TAG_SEPARATOR}<SELECTOR>"
        )
    return get_tag(parts[0], parts[1])
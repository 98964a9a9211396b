"""Conversion between wire property keys and Python accessor names."""

import re

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")


def property_name(key: str) -> str:
    """Return the snake_case accessor name for a property key.

    >>> property_name("givenName")
    'given_name'
    >>> property_name("post-office-box")
    'post_office_box'
    """
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", key)
    name = _WORD_BOUNDARY.sub(r"\1_\2", name)
    return name.replace("-", "_").lower()


def wire_key(name: str) -> str:
    """Return the lowerCamelCase wire key for an accessor name (`given_name` -> `givenName`)."""
    head, *rest = name.split("_")
    return head[:1].lower() + head[1:] + "".join(word[:1].upper() + word[1:] for word in rest)

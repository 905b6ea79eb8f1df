"""Identifier conventions."""

from __future__ import annotations

import re

_GENERIC_SUFFIX = re.compile(r"(`\d+|<[^<>]*(<[^<>]*>[^<>]*)*>)$")
_PASCAL_CASE = re.compile(r"^[A-Z][A-Za-z0-9]*$")
_CAMEL_CASE = re.compile(r"^[a-z][A-Za-z0-9]*$")
_INTERFACE_NAME = re.compile(r"^I[A-Z][A-Za-z0-9]*$")
_HUMP = re.compile(r"[a-z0-9][A-Z]")
_SHOULD_HUMP = re.compile(r"^Should[A-Z0-9]")

DISCARD = "_"


def strip_generic_suffix(name: str) -> str:
    """Drop a generic arity or type-argument suffix: ``Repository<T>`` -> ``Repository``."""
    return _GENERIC_SUFFIX.sub("", name)


def is_pascal_case(name: str) -> bool:
    return bool(_PASCAL_CASE.match(strip_generic_suffix(name)))


def is_interface_name(name: str) -> bool:
    return bool(_INTERFACE_NAME.match(strip_generic_suffix(name)))


def is_camel_case(name: str) -> bool:
    return name == DISCARD or bool(_CAMEL_CASE.match(name))


def is_test_phrase(name: str) -> bool:
    """Check that a test name reads as an underscore-separated phrase.

    ``returns_null_when_order_is_missing`` passes; ``GetOrder_ReturnsNull``,
    ``ShouldReturnNull`` and ``should_return_null`` do not. Only a leading
    ``should`` word counts, so ``shoulder_strap_is_returned`` passes.
    """
    segments = name.split("_")
    if segments[0].lower() == "should" or _SHOULD_HUMP.match(segments[0]):
        return False
    if len(segments) < 2 or not all(segments):
        return False
    return not any(_HUMP.search(segment) for segment in segments)


__all__ = [
    "is_camel_case",
    "is_interface_name",
    "is_pascal_case",
    "is_test_phrase",
    "strip_generic_suffix",
]

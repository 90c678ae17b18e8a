"""$ref resolution for parameter and schema fragments.

Resolution is pure: a new fragment is built and neither the fragment nor
the document is modified, so one document can serve concurrent builds.
"""

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

from openapi_request_factory.errors import (
    InvalidReferenceError,
    ReferenceCycleError,
    UnresolvableReferenceError,
)

REF_KEY = "$ref"

SECTIONS = (
    "schemas",
    "parameters",
    "responses",
    "requestBodies",
    "headers",
    "securitySchemes",
    "links",
    "callbacks",
    "examples",
)
_POINTER = r"#/components/(?:" + "|".join(SECTIONS) + r")/[\w.-]+"
LOCAL_REF = re.compile(rf"\A{_POINTER}\Z")
EXTERNAL_REF = re.compile(rf"\A(?P<uri>[^#\s]+)(?P<pointer>{_POINTER})\Z")


def has_reference(fragment: Any) -> bool:
    """Return True if a $ref appears anywhere inside the fragment."""
    if isinstance(fragment, Mapping):
        return REF_KEY in fragment or any(has_reference(v) for v in fragment.values())
    if isinstance(fragment, list):
        return any(has_reference(v) for v in fragment)
    return False


def is_valid_reference(ref: Any) -> bool:
    if not isinstance(ref, str) or not ref:
        return False
    return bool(LOCAL_REF.match(ref)) or _is_external_reference(ref)


def _is_external_reference(ref: str) -> bool:
    match = EXTERNAL_REF.match(ref)
    if not match:
        return False
    try:
        parts = urlsplit(match.group("uri"))
    except ValueError:
        return False
    return bool(parts.scheme or parts.path)


def lookup_reference(ref: Any, document: Mapping) -> Any:
    """Return the object a pointer designates inside the document."""
    if not is_valid_reference(ref):
        raise InvalidReferenceError(ref)

    # External pointers are dereferenced against the (bundled) root document.
    pointer = ref[ref.index("#") + 2:]
    node: Any = document
    for part in pointer.split("/"):
        if not isinstance(node, Mapping) or part not in node:
            raise UnresolvableReferenceError(ref)
        node = node[part]
    if node is None:
        raise UnresolvableReferenceError(ref)
    return node


def resolve_references(fragment: Any, document: Mapping, _chain: tuple[str, ...] = ()) -> Any:
    """Return a copy of the fragment with every $ref replaced by its target.

    A mapping holding a $ref becomes the target merged over its sibling keys.
    Targets are resolved recursively; revisiting a pointer that is still
    being expanded raises ReferenceCycleError.
    """
    if isinstance(fragment, list):
        return [resolve_references(item, document, _chain) for item in fragment]
    if not isinstance(fragment, Mapping):
        return fragment

    resolved = {
        key: resolve_references(value, document, _chain)
        for key, value in fragment.items()
        if key != REF_KEY
    }
    if REF_KEY not in fragment:
        return resolved

    ref = fragment[REF_KEY]
    if ref in _chain:
        raise ReferenceCycleError([*_chain, ref])
    target = resolve_references(lookup_reference(ref, document), document, (*_chain, ref))
    if isinstance(target, Mapping):
        resolved.update(target)
        return resolved
    return target

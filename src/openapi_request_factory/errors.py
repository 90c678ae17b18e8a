"""Exceptions raised while building a request from an OpenAPI operation.

Every error is fatal to the current build: nothing is retried and no
partial request is returned.
"""

from typing import Any


class RequestFactoryError(Exception):
    """Base exception for request building errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidReferenceError(RequestFactoryError):
    """Raised when a $ref string is malformed or targets a disallowed section."""

    def __init__(self, reference: Any):
        self.reference = reference
        super().__init__(
            f"Invalid object reference '{reference}'",
            {"reference": reference},
        )


class UnresolvableReferenceError(RequestFactoryError):
    """Raised when a well-formed $ref does not point at anything in the document."""

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(
            f"Cannot resolve referenced object '{reference}'",
            {"reference": reference},
        )


class ReferenceCycleError(RequestFactoryError):
    """Raised when a $ref is revisited while it is still being resolved."""

    def __init__(self, chain: list[str]):
        self.chain = chain
        super().__init__(
            "Reference cycle detected: " + " -> ".join(chain),
            {"chain": chain},
        )


class MissingValueError(RequestFactoryError):
    """Raised when a path or header parameter has no supplied value."""

    def __init__(self, parameter: str, location: str):
        self.parameter = parameter
        self.location = location
        super().__init__(
            f"`{parameter}` {location} parameter key present, but no value was "
            "supplied for it in the example context",
            {"parameter": parameter, "in": location},
        )


class MissingParameterError(RequestFactoryError):
    """Raised when a declared body parameter has no supplied value."""

    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(
            f"Missing parameter '{parameter}'\n\n"
            "Please check your example. It looks like you declared a body parameter,\n"
            "but did not supply a value for it. Try adding it to the request params:\n\n"
            f"    request_params={{\"{parameter}\": ...}}\n",
            {"parameter": parameter},
        )


class InvalidArgumentError(RequestFactoryError):
    """Raised when a supplied value has the wrong shape: params or headers that
    are not mappings, or a body value that cannot be serialized."""


class InvalidFieldError(RequestFactoryError):
    """Raised when a parameter declares a field the builders cannot honour."""

    def __init__(self, parameter: str | None, field: str, reason: str):
        self.parameter = parameter
        self.field = field
        super().__init__(
            f"Parameter '{parameter}': {reason}",
            {"parameter": parameter, "field": field},
        )


class ConfigurationError(RequestFactoryError):
    """Raised when documents cannot be located or loaded."""

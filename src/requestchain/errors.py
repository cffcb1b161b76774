"""
Exceptions raised by the request chain.

Rejections (400 / 401 / 429) are never exceptions: they are ordinary
Response values returned by the stage that rejected the request. The
only things raised here are programming errors caught at construction
time, so a misconfigured chain fails before it ever sees a request.
"""


class ChainError(Exception):
    """Base class for request chain errors."""


class ChainConfigurationError(ChainError, ValueError):
    """
    A chain or stage was built with invalid settings.

    Examples: a stage constructed without a downstream handler, a
    non-positive rate-limit window, an unknown log format.
    """


class UnknownVariantError(ChainError, LookupError):
    """A tagged-variant dispatch was asked for a tag it has no entry for."""

    def __init__(self, kind: str, tag):
        self.kind = kind
        self.tag = tag
        super().__init__(f"No {kind} registered for {tag!r}")

"""Object name encoding for request URIs.

With auto-encoding enabled every object name is percent-encoded as a single
path segment, so ``/`` is escaped and virtual folders cannot be addressed.
With it disabled names are passed through untouched; the caller is then
responsible for URI safety.
"""

from urllib.parse import quote, unquote


def encode_component(value: str) -> str:
    """Percent-encode a value for use as one URI path segment or query value."""
    return quote(value, safe="")


class NameCodec:
    """Applies the auto-encode policy to object names."""

    def __init__(self, auto_encode: bool):
        self.auto_encode = auto_encode

    def encode(self, name: str) -> str:
        if not self.auto_encode:
            return name
        return encode_component(name)

    def decode(self, name: str) -> str:
        if not self.auto_encode:
            return name
        return unquote(name)

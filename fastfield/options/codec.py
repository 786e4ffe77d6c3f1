# Copyright Krafter SAS <developer@krafter.io>
# MIT License (see LICENSE file).

import base64
import binascii
import logging

from typing import TYPE_CHECKING, overload

if TYPE_CHECKING:
    from fastfield.options.types import MultiFieldValue, OptionRef


logger = logging.getLogger("fastfield.options")

ENCODING_PREFIX = "base64:"


class ValueCodec:
    """
    Reversible opaque wrapping of option values for transport.

    Encoded values look like "base64:Zm9v". Decoding is only applied to
    values carrying the prefix, and only by callers that opted into the
    encoded transport (see OptionsField.normalize(encoded=True)).
    """

    def __init__(self, prefix: str = ENCODING_PREFIX):
        self.prefix = prefix

    @overload
    def encode(self, value: "MultiFieldValue") -> list[str | None]: ...

    @overload
    def encode(self, value: "OptionRef | str | None") -> str | None: ...

    def encode(self, value):
        from fastfield.options.types import MultiFieldValue, OptionRef

        if isinstance(value, MultiFieldValue):
            return [self.encode(ref) for ref in value]

        if isinstance(value, OptionRef):
            value = value.value

        if value is None or value == "":
            return value

        encoded = base64.b64encode(str(value).encode("utf-8")).decode("ascii")

        return f"{self.prefix}{encoded}"

    def is_encoded(self, value: object) -> bool:
        return isinstance(value, str) and value.startswith(self.prefix)

    def decode(self, value: str) -> str:
        """
        Decode a prefixed value, returning it unchanged when it is not encoded.

        A prefixed value whose payload is not valid base64 (or not UTF-8) is
        kept as-is so a literal value that happens to start with the prefix
        still round-trips.
        """
        if not self.is_encoded(value):
            return value

        payload = value[len(self.prefix) :]

        try:
            return base64.b64decode(payload, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            logger.debug(f"Value {value!r} is not a valid encoded value, kept as-is")
            return value


__all__ = [
    "ENCODING_PREFIX",
    "ValueCodec",
]

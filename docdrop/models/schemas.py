"""
Data models and schemas for the document store.
"""

import re
from dataclasses import dataclass
from pydantic import BaseModel

from docdrop.exceptions import InvalidRequestError
from docdrop.utils.durations import parse_duration
from docdrop.utils.storage import FORBIDDEN_NAME_CHARS

MAX_NAME_LENGTH = 255  # common filesystem limit for a single path component

# Plain decimal integer: no spaces, underscores or non-ASCII digits
_INTEGER = re.compile(r'[+-]?[0-9]+')


@dataclass
class CreateOptions:
    """Per-request overrides for a new document. None means "use the default"."""
    lifetime: float | None = None       # seconds
    name_alphabet: str | None = None
    name_length: int | None = None

    @classmethod
    def from_headers(
        cls,
        lifetime: str | None = None,
        charset: str | None = None,
        length: str | None = None,
    ) -> "CreateOptions":
        """
        Build options from the raw Doc-* header values.

        Empty or missing headers fall back to the server defaults.

        Raises:
            InvalidRequestError: if a header cannot be parsed
        """
        options = cls()

        if lifetime:
            try:
                options.lifetime = parse_duration(lifetime)
            except ValueError as e:
                raise InvalidRequestError(f"Invalid Doc-Lifetime: {e}") from e
            if options.lifetime < 0:
                raise InvalidRequestError("Doc-Lifetime must not be negative")

        if charset:
            options.name_alphabet = charset

        if length:
            if not _INTEGER.fullmatch(length):
                raise InvalidRequestError(f"Invalid Doc-Name-Length: {length!r}")
            options.name_length = int(length)

        return options


def validate_name_params(alphabet: str, length: int) -> str:
    """
    Check an alphabet/length pair and return the de-duplicated alphabet.

    Raises:
        InvalidRequestError: if names built from them could not be stored
    """
    if not alphabet:
        raise InvalidRequestError("Name alphabet must not be empty")
    if any(char in alphabet for char in FORBIDDEN_NAME_CHARS):
        raise InvalidRequestError("Name alphabet contains a path separator or NUL")
    if not 1 <= length <= MAX_NAME_LENGTH:
        raise InvalidRequestError(f"Name length must be between 1 and {MAX_NAME_LENGTH}")
    return "".join(dict.fromkeys(alphabet))


class StoreStatus(BaseModel):
    """Response of the status endpoint."""
    status: str
    service: str
    version: str
    document_count: int
    max_document_count: int

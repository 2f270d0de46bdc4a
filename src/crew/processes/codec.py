"""Newline-delimited JSON framing for the parent/child data channel."""

import typing as t

from pydantic_core import from_json, to_json

NEWLINE: t.Final = b"\n"


def encode_message(data: t.Any) -> bytes:
    """Encode one message as a JSON line.

    Raises:
        ValueError: If ``data`` cannot be serialised to JSON
    """
    return to_json(data) + NEWLINE


def decode_message(line: bytes) -> t.Any:
    """Decode one line from the channel.

    Lines that are not valid JSON (e.g. a stray ``print``) are returned as
    plain text rather than dropped.
    """
    payload = line.rstrip(b"\r\n")
    try:
        return from_json(payload)
    except ValueError:
        return payload.decode("utf-8", errors="replace")

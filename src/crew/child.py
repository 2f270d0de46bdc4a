"""Helpers for worker scripts running under a crew pool.

A worker script talks to its parent over stdin/stdout, one JSON document per
line. Anything else written to stdout reaches the parent as a plain string
message, so use stderr (or logging) for diagnostics.

Example worker script:

    from crew import child

    n = child.receive()
    child.send({"square": n * n})
"""

import sys
import typing as t

from .processes.codec import decode_message, encode_message


def send(message: t.Any) -> None:
    """Send one message to the parent process."""
    sys.stdout.buffer.write(encode_message(message))
    sys.stdout.buffer.flush()


def receive(default: t.Any = None) -> t.Any:
    """Block until the next message from the parent.

    Returns ``default`` once the parent has disconnected.
    """
    line = sys.stdin.buffer.readline()
    if not line:
        return default
    return decode_message(line)


def messages() -> t.Iterator[t.Any]:
    """Iterate messages from the parent until it disconnects."""
    for line in sys.stdin.buffer:
        if line.strip():
            yield decode_message(line)

"""Process launching: the contract workers depend on and its default backend."""

from .base import BaseLauncher, BaseProcess
from .codec import decode_message, encode_message
from .launcher import SubprocessLauncher, SubprocessProcess

__all__ = [
    "BaseLauncher",
    "BaseProcess",
    "SubprocessLauncher",
    "SubprocessProcess",
    "decode_message",
    "encode_message",
]

"""Local host name lookup, resolved once per process."""

import socket
from functools import lru_cache

UNKNOWN_HOST = "unknown-host"


def resolve_host_name() -> str:
    try:
        return socket.gethostname() or UNKNOWN_HOST
    except OSError:
        return UNKNOWN_HOST


@lru_cache()
def get_host_name() -> str:
    return resolve_host_name()

"""synthcache - cache-aside text-to-speech across interchangeable providers."""

import logging

__version__ = "0.1.0"
__all__ = ["purge", "synthesize"]

logging.getLogger(__name__).addHandler(logging.NullHandler())


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name in ("synthesize", "purge"):
        from . import api

        return getattr(api, name)
    raise AttributeError(f"module 'synthcache' has no attribute {name!r}")

from .wayback_client import WaybackClient

__all__ = [
    "WaybackClient",
]

"""Host adapters implementing TaskHostPort."""

from taskbridge.adapters.host.in_memory import InMemoryTaskHost, Notification

__all__ = ["InMemoryTaskHost", "Notification"]

"""Chat error types.

Every failure that can happen while handling a client event is one of these.
Handlers catch ``ChatError`` at the event boundary and send ``client_message``
back to the originating connection as an ``error`` event.
"""

from typing import Optional


class ChatError(Exception):
    """Base class. ``client_message`` is safe to show to the client."""

    client_message = "Request failed"

    def __init__(self, detail: str = "", client_message: Optional[str] = None):
        super().__init__(detail or self.client_message)
        self.detail = detail
        if client_message is not None:
            self.client_message = client_message


class AuthorizationFailure(ChatError):
    """Join rejected: the user is not a party to the order."""

    client_message = "Unauthorized access to this conversation"


class AuthenticationRequired(ChatError):
    """A message was sent before the connection joined a room."""

    client_message = "Not authenticated"


class PersistenceFailure(ChatError):
    """The store was unreachable or a query failed."""

    client_message = "Database error"


class NotFoundFailure(ChatError):
    """A referenced order or message does not exist."""

    client_message = "Not found"

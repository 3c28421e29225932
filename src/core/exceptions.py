"""
Exceptions raised by the domain layer.

The service layer turns every `GameError` into a rejection for the client, except
`OccupiedTileError` which signals an internal inconsistency.
"""


class GameError(Exception):
    """Base class for everything the game layers raise on purpose."""


# --- structural errors ---
class InvalidActionError(GameError):
    """Malformed action bytes, unknown action type, or tile id outside the board."""


class InvalidRequestError(GameError):
    """A wire message failed validation."""


class InvalidLayoutError(GameError):
    """Board layout string could not be parsed."""


# --- turn / phase violations ---
class NotYourTurnError(GameError):
    pass


class WrongPhaseError(GameError):
    """Action does not fit the current phase (ex. a piece move during card selection)."""


class GameOverError(GameError):
    pass


# --- rule violations ---
class IllegalMoveError(GameError):
    pass


class IllegalCardError(GameError):
    pass


# --- invariant violations ---
class OccupiedTileError(GameError):
    """Tried to put a piece on a tile that already holds one. Should never be reached if validation precedes mutation."""


# --- sessions / rooms ---
class RoomFullError(GameError):
    def __init__(self, room_id: str):
        self.room_id = room_id
        super().__init__(f"Room '{room_id}' is full")


class SessionNotFoundError(GameError):
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session '{session_id}' is not part of any room")


class PendingActionError(GameError):
    """Client already has an action in flight and must wait for the server's answer."""

from .channel import HttpChannel, LocalChannel, TransitionChannel
from .controller import BoardController, BoardViewState, Notification, Severity

__all__ = [
    "BoardController",
    "BoardViewState",
    "HttpChannel",
    "LocalChannel",
    "Notification",
    "Severity",
    "TransitionChannel",
]

"""Session state machine: state, events, pure dispatch, and effect execution."""

from __future__ import annotations

from .controller import SessionController
from .dispatch import dispatch
from .effects import EffectRunner
from .state import ModalKind, Session, ViewMode, new_session, saved_session_from

__all__ = [
    "EffectRunner",
    "ModalKind",
    "Session",
    "SessionController",
    "ViewMode",
    "dispatch",
    "new_session",
    "saved_session_from",
]

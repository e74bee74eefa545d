"""Small key-dispatch table used by the session dispatcher."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

KeyHandler = Callable[[], None]


@dataclass(frozen=True)
class KeyBinding:
    """Mapping from one or more key tokens to a single action callback."""

    keys: tuple[str, ...]
    handler: KeyHandler


class KeyRegistry:
    def __init__(self) -> None:
        self._handlers: dict[str, KeyHandler] = {}

    def bind(self, *keys: str) -> Callable[[KeyHandler], KeyHandler]:
        """Decorator form of ``register``."""

        def decorator(handler: KeyHandler) -> KeyHandler:
            self.register(KeyBinding(tuple(keys), handler))
            return handler

        return decorator

    def register(self, binding: KeyBinding) -> KeyRegistry:
        for key in binding.keys:
            self._handlers[key] = binding.handler
        return self

    def dispatch(self, key: str) -> bool:
        """Run the handler bound to ``key``; ``False`` when nothing is bound."""
        handler = self._handlers.get(key)
        if handler is None:
            return False
        handler()
        return True


def is_text_key(key: str) -> bool:
    """Whether ``key`` is a single printable character token."""
    return len(key) == 1 and key.isprintable()


__all__ = ["KeyBinding", "KeyHandler", "KeyRegistry", "is_text_key"]

"""Factory helpers for wiring runtime services."""

from .session_factory import create_game_session

__all__ = ["create_game_session"]

"""Tmux host integration."""

from .controller import TmuxController

__all__ = ["TmuxController"]

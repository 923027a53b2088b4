"""Views subsystem: View protocol, ViewManager, and the game and settings screens."""

from kanafall.views.base import View, ViewAction, ViewContext, ViewManager
from kanafall.views.game_view import GameView
from kanafall.views.settings_view import SettingsView

BUILTIN_VIEWS = (GameView, SettingsView)

__all__ = ["BUILTIN_VIEWS", "GameView", "SettingsView", "View", "ViewAction", "ViewContext", "ViewManager"]

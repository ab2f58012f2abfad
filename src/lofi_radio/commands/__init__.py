"""Command handlers for the interactive radio prompt.

Each handler takes the AppContext (plus parsed arguments) and returns
``(ctx, should_continue)``.
"""

from . import playback

__all__ = ["playback"]

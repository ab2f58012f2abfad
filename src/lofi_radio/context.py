"""Application context for explicit state passing.

Command handlers receive the context instead of reaching for module
globals. The supervisor inside it is the only mutable piece, and it guards
its own state.
"""

from dataclasses import dataclass
from typing import Optional

from rich.console import Console

from lofi_radio.core.config import Config
from lofi_radio.domain.playback import PlaybackSupervisor


@dataclass(frozen=True)
class AppContext:
    """Immutable application context passed to command handlers.

    Attributes:
        config: Application configuration
        supervisor: Playback supervisor owning the player process
        console: Rich Console for formatted output
    """

    config: Config
    supervisor: PlaybackSupervisor
    console: Console

    @classmethod
    def create(
        cls,
        config: Config,
        console: Console,
        supervisor: Optional[PlaybackSupervisor] = None,
        volume: Optional[int] = None,
    ) -> "AppContext":
        """Create initial application context.

        Args:
            config: Application configuration
            console: Rich Console instance
            supervisor: Existing supervisor (a new one is built from config otherwise)
            volume: Initial volume for a new supervisor
        """
        if supervisor is None:
            supervisor = PlaybackSupervisor(config.player, volume=volume)
        return cls(config=config, supervisor=supervisor, console=console)

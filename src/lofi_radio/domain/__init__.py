"""Domain layer: station catalog and playback supervision."""

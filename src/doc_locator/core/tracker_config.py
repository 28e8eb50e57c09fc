"""Position tracking configuration."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TrackerConfig:
    """
    Attributes:
        auto_save: Persist the position periodically while tracking.
        position_threshold: Minimum scroll movement (px) before a scroll commit saves.
        save_interval_ms: Autosave period.
        debounce_ms: Quiet time after the last scroll event before committing.
        track_scroll: React to scroll events.
        track_selection: Emit selection change events.
        strict_validation: Treat content drift as a failed restore.
        fingerprint_positions: Attach content hashes to tracked Locations.
    """

    auto_save: bool = True
    position_threshold: float = 100.0
    save_interval_ms: int = 5000
    debounce_ms: int = 150
    track_scroll: bool = True
    track_selection: bool = False
    strict_validation: bool = False
    fingerprint_positions: bool = True

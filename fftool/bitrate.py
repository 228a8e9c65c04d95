"""
Bitrate budget for size-targeted two-pass encodes
"""

from .exceptions import BudgetTooSmall, DurationUnknown
from .models import SizeBudget

# kilobits per (binary) megabyte, matching the MB shown in size reports
KBITS_PER_MB = 8192
DEFAULT_AUDIO_BITRATE_KBPS = 128


def compute_budget(target_size_mb: int, duration_seconds, audio_bitrate_kbps: int = DEFAULT_AUDIO_BITRATE_KBPS) -> SizeBudget:
    """Split a target file size into audio and video bitrates

    Fractional durations are truncated to whole seconds. Muxing overhead is
    ignored, so the result is an estimate.
    """
    duration = int(duration_seconds or 0)
    if duration <= 0:
        raise DurationUnknown()

    total = (int(target_size_mb) * KBITS_PER_MB) // duration
    video = total - audio_bitrate_kbps
    if video <= 0:
        raise BudgetTooSmall(target_size_mb, video)

    return SizeBudget(
        target_size_mb=int(target_size_mb),
        duration_seconds=duration,
        total_bitrate_kbps=total,
        audio_bitrate_kbps=audio_bitrate_kbps,
        video_bitrate_kbps=video,
    )

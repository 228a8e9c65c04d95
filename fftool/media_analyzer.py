"""
Media file analysis and classification
"""

from pathlib import Path

from .exceptions import InputNotFound
from .ffmpeg_runner import ffprobe_streams, get_duration
from .models import MediaDescriptor
from .operations import MediaKind

# Decoders ffprobe reports for single-picture inputs
STILL_IMAGE_CODECS = {
    'png', 'apng', 'mjpeg', 'jpeg2000', 'jpegls', 'bmp', 'gif', 'webp', 'tiff',
    'ppm', 'pgm', 'pam', 'targa', 'sgi', 'exr', 'qoi', 'jpegxl', 'dpx', 'pcx',
}


def _frame_count(stream):
    try:
        return int(stream.get('nb_frames'))
    except (TypeError, ValueError):
        return None


def classify_streams(streams) -> MediaKind:
    """Decide the media kind from ffprobe stream entries

    Video + audio is video, audio only is audio. A lone video stream is a
    silent video when ffprobe reports more than one frame. Containers such as
    MKV and WebM carry no frame count, so without one the codec decides: a
    still-picture decoder means an image, anything else a silent video.
    """
    v = next((s for s in streams if s.get('codec_type') == 'video'), None)
    has_audio = any(s.get('codec_type') == 'audio' for s in streams)

    if v and has_audio:
        return MediaKind.VIDEO
    if v:
        frames = _frame_count(v)
        if frames is not None:
            return MediaKind.VIDEO if frames > 1 else MediaKind.IMAGE
        if v.get('codec_name') in STILL_IMAGE_CODECS:
            return MediaKind.IMAGE
        return MediaKind.VIDEO
    if has_audio:
        return MediaKind.AUDIO
    return MediaKind.UNKNOWN


def discover_media(path: Path, ffprobe='ffprobe') -> MediaDescriptor:
    """Analyze media file and return its descriptor

    Raises InputNotFound for a missing file. Any ffprobe failure yields an
    ``unknown`` descriptor with a warning instead of an exception.
    """
    path = Path(path)
    if not path.is_file():
        raise InputNotFound(path)

    extension = path.suffix.lower().lstrip('.')
    size_bytes = path.stat().st_size

    try:
        streams = ffprobe_streams(path, ffprobe)
    except (RuntimeError, OSError, ValueError) as e:
        return MediaDescriptor(
            path=path, kind=MediaKind.UNKNOWN, extension=extension, size_bytes=size_bytes,
            warning=f"File type not recognized ({e})",
        )

    kind = classify_streams(streams)
    v = next((s for s in streams if s.get('codec_type') == 'video'), None)
    a = next((s for s in streams if s.get('codec_type') == 'audio'), None)

    resolution = None
    if v and v.get('width') and v.get('height'):
        resolution = (int(v['width']), int(v['height']))

    duration = None
    if kind in (MediaKind.VIDEO, MediaKind.AUDIO):
        duration = get_duration(path, ffprobe)
        if duration is not None and duration < 0:
            duration = None

    return MediaDescriptor(
        path=path,
        kind=kind,
        video_codec=(v or {}).get('codec_name'),
        audio_codec=(a or {}).get('codec_name'),
        resolution=resolution,
        duration_seconds=duration,
        extension=extension,
        size_bytes=size_bytes,
        has_video=v is not None,
        has_audio=a is not None,
        warning="File type not recognized" if kind == MediaKind.UNKNOWN else None,
    )

"""
Media kinds and the catalogue of operations the tool can build commands for
"""

from collections import namedtuple
from enum import Enum


class MediaKind(Enum):
    VIDEO = "video"
    AUDIO = "audio"
    IMAGE = "image"
    UNKNOWN = "unknown"


class Group(Enum):
    CONVERT_VIDEO = "Convert video"
    CONVERT_AUDIO = "Convert audio"
    CONVERT_IMAGE = "Convert image"
    COMPRESS = "Compress (reduce file size)"
    SPEED = "Change speed"
    CUT = "Cut/trim"
    EXTRACT_AUDIO = "Extract audio from video"
    EXTRAS = "Extras (screenshots, rotate, FPS...)"


OperationInfo = namedtuple('OperationInfo', ['group', 'label', 'extension', 'kinds', 'needs_gpu'])

_V = frozenset({MediaKind.VIDEO})
_A = frozenset({MediaKind.AUDIO})
_I = frozenset({MediaKind.IMAGE})
_AV = frozenset({MediaKind.AUDIO, MediaKind.VIDEO})


class Operation(Enum):
    VIDEO_MP4 = "video_mp4"
    VIDEO_MKV = "video_mkv"
    VIDEO_WEBM = "video_webm"
    VIDEO_MOV = "video_mov"
    VIDEO_AVI = "video_avi"
    VIDEO_GIF = "video_gif"
    VIDEO_HEVC = "video_hevc"

    AUDIO_MP3_128 = "audio_mp3_128"
    AUDIO_MP3_192 = "audio_mp3_192"
    AUDIO_MP3_320 = "audio_mp3_320"
    AUDIO_AAC = "audio_aac"
    AUDIO_OGG = "audio_ogg"
    AUDIO_OPUS = "audio_opus"
    AUDIO_WAV = "audio_wav"
    AUDIO_FLAC = "audio_flac"

    IMAGE_JPG = "image_jpg"
    IMAGE_PNG = "image_png"
    IMAGE_WEBP = "image_webp"
    IMAGE_BMP = "image_bmp"
    IMAGE_RESIZE = "image_resize"

    COMPRESS_LIGHT = "compress_light"
    COMPRESS_MEDIUM = "compress_medium"
    COMPRESS_HEAVY = "compress_heavy"
    COMPRESS_BRUTAL = "compress_brutal"
    COMPRESS_720P = "compress_720p"
    COMPRESS_480P = "compress_480p"
    COMPRESS_CUSTOM_CRF = "compress_custom_crf"
    COMPRESS_TARGET_SIZE = "compress_target_size"
    COMPRESS_GPU = "compress_gpu"

    CHANGE_SPEED = "change_speed"

    CUT_FAST = "cut_fast"
    CUT_PRECISE = "cut_precise"
    CUT_FIRST = "cut_first"
    CUT_LAST = "cut_last"

    EXTRACT_MP3_320 = "extract_mp3_320"
    EXTRACT_MP3_192 = "extract_mp3_192"
    EXTRACT_AAC_COPY = "extract_aac_copy"
    EXTRACT_WAV = "extract_wav"
    EXTRACT_FLAC = "extract_flac"

    SCREENSHOT = "screenshot"
    SCREENSHOT_SERIES = "screenshot_series"
    REMOVE_AUDIO = "remove_audio"
    CHANGE_FPS = "change_fps"
    ROTATE = "rotate"
    MIRROR = "mirror"
    GRAYSCALE = "grayscale"
    NORMALIZE_AUDIO = "normalize_audio"
    REVERSE = "reverse"

    @property
    def info(self) -> OperationInfo:
        return OPERATIONS[self]

    @property
    def label(self) -> str:
        return OPERATIONS[self].label

    @property
    def group(self) -> Group:
        return OPERATIONS[self].group

    def supports(self, kind: MediaKind) -> bool:
        return kind in OPERATIONS[self].kinds


# extension None means "keep the input's extension"
OPERATIONS = {
    Operation.VIDEO_MP4: OperationInfo(Group.CONVERT_VIDEO, "MP4 (H.264 + AAC) - most compatible", 'mp4', _V, False),
    Operation.VIDEO_MKV: OperationInfo(Group.CONVERT_VIDEO, "MKV (copy codecs - instant)", 'mkv', _V, False),
    Operation.VIDEO_WEBM: OperationInfo(Group.CONVERT_VIDEO, "WebM (VP9 + Opus - for web)", 'webm', _V, False),
    Operation.VIDEO_MOV: OperationInfo(Group.CONVERT_VIDEO, "MOV (H.264 + AAC - Apple)", 'mov', _V, False),
    Operation.VIDEO_AVI: OperationInfo(Group.CONVERT_VIDEO, "AVI (H.264 + MP3)", 'avi', _V, False),
    Operation.VIDEO_GIF: OperationInfo(Group.CONVERT_VIDEO, "GIF (animation)", 'gif', _V, False),
    Operation.VIDEO_HEVC: OperationInfo(Group.CONVERT_VIDEO, "MP4 H.265/HEVC (better compression)", 'mp4', _V, False),

    Operation.AUDIO_MP3_128: OperationInfo(Group.CONVERT_AUDIO, "MP3 128k (small)", 'mp3', _AV, False),
    Operation.AUDIO_MP3_192: OperationInfo(Group.CONVERT_AUDIO, "MP3 192k (good)", 'mp3', _AV, False),
    Operation.AUDIO_MP3_320: OperationInfo(Group.CONVERT_AUDIO, "MP3 320k (best MP3)", 'mp3', _AV, False),
    Operation.AUDIO_AAC: OperationInfo(Group.CONVERT_AUDIO, "AAC 256k (.m4a)", 'm4a', _AV, False),
    Operation.AUDIO_OGG: OperationInfo(Group.CONVERT_AUDIO, "OGG Vorbis", 'ogg', _AV, False),
    Operation.AUDIO_OPUS: OperationInfo(Group.CONVERT_AUDIO, "Opus 128k (best modern)", 'opus', _AV, False),
    Operation.AUDIO_WAV: OperationInfo(Group.CONVERT_AUDIO, "WAV (lossless, large)", 'wav', _AV, False),
    Operation.AUDIO_FLAC: OperationInfo(Group.CONVERT_AUDIO, "FLAC (lossless, compressed)", 'flac', _AV, False),

    Operation.IMAGE_JPG: OperationInfo(Group.CONVERT_IMAGE, "-> JPG", 'jpg', _I, False),
    Operation.IMAGE_PNG: OperationInfo(Group.CONVERT_IMAGE, "-> PNG", 'png', _I, False),
    Operation.IMAGE_WEBP: OperationInfo(Group.CONVERT_IMAGE, "-> WebP", 'webp', _I, False),
    Operation.IMAGE_BMP: OperationInfo(Group.CONVERT_IMAGE, "-> BMP", 'bmp', _I, False),
    Operation.IMAGE_RESIZE: OperationInfo(Group.CONVERT_IMAGE, "Resize (set width)", None, _I, False),

    Operation.COMPRESS_LIGHT: OperationInfo(Group.COMPRESS, "Light (~75% of original) CRF 25", 'mp4', _V, False),
    Operation.COMPRESS_MEDIUM: OperationInfo(Group.COMPRESS, "Medium (~50% of original) CRF 28", 'mp4', _V, False),
    Operation.COMPRESS_HEAVY: OperationInfo(Group.COMPRESS, "Heavy (~30% of original) CRF 32", 'mp4', _V, False),
    Operation.COMPRESS_BRUTAL: OperationInfo(Group.COMPRESS, "Brutal (~15% of original) CRF 38", 'mp4', _V, False),
    Operation.COMPRESS_720P: OperationInfo(Group.COMPRESS, "Downscale -> 720p", 'mp4', _V, False),
    Operation.COMPRESS_480P: OperationInfo(Group.COMPRESS, "Downscale -> 480p", 'mp4', _V, False),
    Operation.COMPRESS_CUSTOM_CRF: OperationInfo(Group.COMPRESS, "Custom CRF (you choose)", 'mp4', _V, False),
    Operation.COMPRESS_TARGET_SIZE: OperationInfo(Group.COMPRESS, "Target file size (e.g. 25 MB)", 'mp4', _V, False),
    Operation.COMPRESS_GPU: OperationInfo(Group.COMPRESS, "GPU compress (fast!)", 'mp4', _V, True),

    Operation.CHANGE_SPEED: OperationInfo(Group.SPEED, "Change playback speed", 'mp4', _AV, False),

    Operation.CUT_FAST: OperationInfo(Group.CUT, "From-To (fast, no re-encoding)", None, _AV, False),
    Operation.CUT_PRECISE: OperationInfo(Group.CUT, "From-To (precise, re-encoded)", 'mp4', _AV, False),
    Operation.CUT_FIRST: OperationInfo(Group.CUT, "First N seconds", None, _AV, False),
    Operation.CUT_LAST: OperationInfo(Group.CUT, "Last N seconds", None, _AV, False),

    Operation.EXTRACT_MP3_320: OperationInfo(Group.EXTRACT_AUDIO, "MP3 320k", 'mp3', _V, False),
    Operation.EXTRACT_MP3_192: OperationInfo(Group.EXTRACT_AUDIO, "MP3 192k", 'mp3', _V, False),
    Operation.EXTRACT_AAC_COPY: OperationInfo(Group.EXTRACT_AUDIO, "AAC (copy, no re-encoding - instant)", 'aac', _V, False),
    Operation.EXTRACT_WAV: OperationInfo(Group.EXTRACT_AUDIO, "WAV (lossless)", 'wav', _V, False),
    Operation.EXTRACT_FLAC: OperationInfo(Group.EXTRACT_AUDIO, "FLAC (lossless compressed)", 'flac', _V, False),

    Operation.SCREENSHOT: OperationInfo(Group.EXTRAS, "Screenshot at specific time", 'png', _V, False),
    Operation.SCREENSHOT_SERIES: OperationInfo(Group.EXTRAS, "Screenshots every N seconds", 'png', _V, False),
    Operation.REMOVE_AUDIO: OperationInfo(Group.EXTRAS, "Remove audio (silent video)", None, _V, False),
    Operation.CHANGE_FPS: OperationInfo(Group.EXTRAS, "Change FPS", 'mp4', _V, False),
    Operation.ROTATE: OperationInfo(Group.EXTRAS, "Rotate 90° clockwise", 'mp4', _V, False),
    Operation.MIRROR: OperationInfo(Group.EXTRAS, "Mirror (horizontal flip)", 'mp4', _V, False),
    Operation.GRAYSCALE: OperationInfo(Group.EXTRAS, "Black & white", 'mp4', _V, False),
    Operation.NORMALIZE_AUDIO: OperationInfo(Group.EXTRAS, "Normalize volume", None, _AV, False),
    Operation.REVERSE: OperationInfo(Group.EXTRAS, "Reverse video", 'mp4', _V, False),
}

SPEED_PRESETS = [
    ('1', "+15%  (x1.15)", 1.15),
    ('2', "+25%  (x1.25)", 1.25),
    ('3', "+40%  (x1.40)", 1.40),
    ('4', "+50%  (x1.50)", 1.50),
    ('5', "+60%  (x1.60)", 1.60),
    ('6', "x2    (double)", 2.0),
    ('7', "x3    (triple)", 3.0),
    ('8', "-25%  (x0.75)", 0.75),
    ('9', "-50%  (x0.50 - slow motion)", 0.50),
]


def operations_in(group: Group):
    """Operations of a menu group, in menu order"""
    return [op for op, info in OPERATIONS.items() if info.group == group]

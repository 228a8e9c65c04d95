"""
GPU encoder detection and per-vendor encoder arguments
"""

from .ffmpeg_runner import list_encoders
from .models import EncoderCapability, Vendor

# Checked in this order, first match wins
GPU_ENCODERS = [
    (Vendor.NVIDIA, 'h264_nvenc', 'hevc_nvenc', 'NVIDIA (NVENC)'),
    (Vendor.VAAPI, 'h264_vaapi', 'hevc_vaapi', 'VAAPI (AMD/Intel)'),
    (Vendor.QSV, 'h264_qsv', 'hevc_qsv', 'Intel QuickSync'),
]


def detect_gpu_acceleration(ffmpeg='ffmpeg') -> EncoderCapability:
    """Detect the preferred hardware encoder ffmpeg was built with"""
    output = list_encoders(ffmpeg)
    if not output:
        return EncoderCapability.unavailable()

    encoders_output = output.lower()
    for vendor, encoder, hevc_encoder, name in GPU_ENCODERS:
        if encoder in encoders_output:
            return EncoderCapability(
                available=True,
                vendor=vendor,
                encoder_id=encoder,
                hevc_encoder_id=hevc_encoder if hevc_encoder in encoders_output else None,
                display_name=name,
            )

    return EncoderCapability.unavailable()


def get_gpu_encoder_params(capability: EncoderCapability, quality: int, hevc: bool = False,
                           vaapi_device: str = '/dev/dri/renderD128'):
    """Get GPU-specific encoding parameters

    Returns (input_args, output_args): input_args go before ``-i``.
    """
    if not capability.available:
        return [], []

    encoder = capability.encoder_id
    if hevc and capability.hevc_encoder_id:
        encoder = capability.hevc_encoder_id

    if capability.vendor == Vendor.VAAPI:
        # VAAPI needs the render device and frames uploaded to GPU memory
        return ['-vaapi_device', vaapi_device], [
            '-vf', 'format=nv12,hwupload',
            '-c:v', encoder,
            '-qp', str(quality),
        ]

    if capability.vendor == Vendor.QSV:
        return [], [
            '-c:v', encoder,
            '-global_quality', str(quality),
            '-preset', 'medium',
        ]

    # NVIDIA NVENC
    return [], [
        '-c:v', encoder,
        '-cq', str(quality),
        '-preset', 'p4',
    ]

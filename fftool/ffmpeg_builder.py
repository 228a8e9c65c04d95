"""
FFmpeg command building for every menu operation
"""

import os
from pathlib import Path
from typing import Optional

from .bitrate import compute_budget
from .exceptions import InvalidParameter, MissingCapability, UnsupportedOperation
from .file_utils import ensure_distinct, passlog_files, passlog_prefix, screenshot_dir
from .gpu_utils import get_gpu_encoder_params
from .models import CommandPlan, CommandStep, EncoderCapability, MediaDescriptor, OperationParams, ToolConfig
from .operations import MediaKind, Operation
from .speed import decompose, video_speed_filter

H264 = ['-c:v', 'libx264', '-crf', '23']
H264_MEDIUM = H264 + ['-preset', 'medium']
AAC_128 = ['-c:a', 'aac', '-b:a', '128k']

# Operations whose arguments never depend on user parameters
STATIC_ARGS = {
    Operation.VIDEO_MP4: H264_MEDIUM + ['-c:a', 'aac', '-b:a', '192k'],
    Operation.VIDEO_MKV: ['-c', 'copy'],
    Operation.VIDEO_WEBM: ['-c:v', 'libvpx-vp9', '-crf', '30', '-b:v', '0', '-c:a', 'libopus', '-b:a', '128k'],
    Operation.VIDEO_MOV: H264 + ['-c:a', 'aac', '-b:a', '192k'],
    Operation.VIDEO_AVI: H264 + ['-c:a', 'libmp3lame', '-b:a', '192k'],
    Operation.VIDEO_HEVC: ['-c:v', 'libx265', '-crf', '28', '-preset', 'medium'] + AAC_128 + ['-tag:v', 'hvc1'],

    Operation.AUDIO_MP3_128: ['-vn', '-c:a', 'libmp3lame', '-b:a', '128k'],
    Operation.AUDIO_MP3_192: ['-vn', '-c:a', 'libmp3lame', '-b:a', '192k'],
    Operation.AUDIO_MP3_320: ['-vn', '-c:a', 'libmp3lame', '-b:a', '320k'],
    Operation.AUDIO_AAC: ['-vn', '-c:a', 'aac', '-b:a', '256k'],
    Operation.AUDIO_OGG: ['-vn', '-c:a', 'libvorbis', '-q:a', '6'],
    Operation.AUDIO_OPUS: ['-vn', '-c:a', 'libopus', '-b:a', '128k'],
    Operation.AUDIO_WAV: ['-vn', '-c:a', 'pcm_s16le'],
    Operation.AUDIO_FLAC: ['-vn', '-c:a', 'flac'],

    Operation.IMAGE_PNG: [],
    Operation.IMAGE_BMP: [],

    Operation.COMPRESS_LIGHT: ['-c:v', 'libx264', '-crf', '25', '-preset', 'slow', '-c:a', 'aac', '-b:a', '192k'],
    Operation.COMPRESS_MEDIUM: ['-c:v', 'libx264', '-crf', '28', '-preset', 'slow', '-c:a', 'aac', '-b:a', '128k'],
    Operation.COMPRESS_HEAVY: ['-c:v', 'libx264', '-crf', '32', '-preset', 'slow', '-c:a', 'aac', '-b:a', '96k'],
    Operation.COMPRESS_BRUTAL: ['-c:v', 'libx264', '-crf', '38', '-preset', 'slow', '-c:a', 'aac', '-b:a', '64k'],
    Operation.COMPRESS_720P: ['-vf', 'scale=-2:720'] + H264_MEDIUM + AAC_128,
    Operation.COMPRESS_480P: ['-vf', 'scale=-2:480'] + H264_MEDIUM + ['-c:a', 'aac', '-b:a', '96k'],

    Operation.EXTRACT_MP3_320: ['-vn', '-c:a', 'libmp3lame', '-b:a', '320k'],
    Operation.EXTRACT_MP3_192: ['-vn', '-c:a', 'libmp3lame', '-b:a', '192k'],
    Operation.EXTRACT_AAC_COPY: ['-vn', '-c:a', 'copy'],
    Operation.EXTRACT_WAV: ['-vn', '-c:a', 'pcm_s16le'],
    Operation.EXTRACT_FLAC: ['-vn', '-c:a', 'flac'],

    Operation.REMOVE_AUDIO: ['-an', '-c:v', 'copy'],
    Operation.ROTATE: ['-vf', 'transpose=1'] + H264 + ['-c:a', 'copy'],
    Operation.MIRROR: ['-vf', 'hflip'] + H264 + ['-c:a', 'copy'],
    Operation.GRAYSCALE: ['-vf', 'hue=s=0'] + H264 + ['-c:a', 'copy'],
    Operation.NORMALIZE_AUDIO: ['-af', 'loudnorm', '-c:v', 'copy'],
}

EXTRACT_OPERATIONS = {
    Operation.EXTRACT_MP3_320, Operation.EXTRACT_MP3_192, Operation.EXTRACT_AAC_COPY,
    Operation.EXTRACT_WAV, Operation.EXTRACT_FLAC,
}

RAM_WARNING = "This loads the entire file into RAM - large files may not fit!"


def _num(value) -> str:
    return f"{value:g}"


def _require(params: OperationParams, field: str):
    value = getattr(params, field)
    if value is None:
        raise InvalidParameter(f"Missing parameter: {field}")
    return value


def _ffmpeg(config: ToolConfig, inp: Path, args, out, pre_input=()):
    return [config.ffmpeg, '-hide_banner', *pre_input, '-i', str(inp), *args, '-y', str(out)]


def _speed_args(descriptor: MediaDescriptor, factor: float):
    plan = decompose(factor)
    if descriptor.kind == MediaKind.AUDIO:
        return ['-af', plan.as_filter()]
    if not descriptor.has_audio:
        return ['-filter:v', video_speed_filter(factor), '-an'] + H264_MEDIUM
    graph = f"[0:v]{video_speed_filter(factor)}[v];[0:a]{plan.as_filter()}[a]"
    return ['-filter_complex', graph, '-map', '[v]', '-map', '[a]'] + H264_MEDIUM + AAC_128


def _two_pass_plan(descriptor, params, output_path, config) -> CommandPlan:
    target = _require(params, 'target_size_mb')
    budget = compute_budget(target, descriptor.duration_seconds, config.audio_bitrate_kbps)
    prefix = passlog_prefix(output_path)
    video = ['-c:v', 'libx264', '-b:v', f"{budget.video_bitrate_kbps}k"]
    inp = str(descriptor.path)

    pass1 = [config.ffmpeg, '-hide_banner', '-y', '-i', inp, *video,
             '-pass', '1', '-passlogfile', str(prefix), '-an', '-f', 'null', os.devnull]
    pass2 = [config.ffmpeg, '-hide_banner', '-i', inp, *video,
             '-pass', '2', '-passlogfile', str(prefix),
             '-c:a', 'aac', '-b:a', f"{budget.audio_bitrate_kbps}k", '-y', str(output_path)]

    return CommandPlan(
        operation=Operation.COMPRESS_TARGET_SIZE,
        input_path=descriptor.path,
        output_path=output_path,
        steps=[CommandStep(label='Pass 1', args=pass1), CommandStep(label='Pass 2', args=pass2)],
        cleanup_paths=passlog_files(prefix),
        budget=budget,
        duration_seconds=descriptor.duration_seconds,
    )


def validate_operation(operation: Operation, descriptor: MediaDescriptor, capability: EncoderCapability):
    """Check that an operation can be applied to this input at all"""
    if not operation.supports(descriptor.kind):
        raise UnsupportedOperation(operation, descriptor.kind)
    if operation.info.needs_gpu and not capability.available:
        raise MissingCapability()
    if operation in EXTRACT_OPERATIONS and not descriptor.has_audio:
        raise UnsupportedOperation(operation, descriptor.kind, "This video has no audio stream to extract")


def build_ffmpeg_cmd(operation: Operation, descriptor: MediaDescriptor, capability: EncoderCapability,
                     params: Optional[OperationParams] = None, output_path: Optional[Path] = None,
                     config: Optional[ToolConfig] = None) -> CommandPlan:
    """Build the command plan for an operation on the current input

    Raises UnsupportedOperation, MissingCapability, InvalidOutputPath or
    InvalidParameter before anything is executed.
    """
    params = params or OperationParams()
    config = config or ToolConfig()
    inp = descriptor.path

    validate_operation(operation, descriptor, capability)

    if operation == Operation.SCREENSHOT_SERIES:
        out_dir = screenshot_dir(inp)
        pattern = out_dir / 'thumb_%04d.png'
        args = ['-vf', f"fps=1/{_num(params.interval)}"]
        return CommandPlan(
            operation=operation, input_path=inp, output_path=pattern, output_dir=out_dir,
            steps=[CommandStep(label=operation.label, args=_ffmpeg(config, inp, args, pattern))],
            duration_seconds=descriptor.duration_seconds,
        )

    if output_path is None:
        raise InvalidParameter("Missing output file")
    output_path = Path(output_path)
    ensure_distinct(inp, output_path)

    if operation == Operation.COMPRESS_TARGET_SIZE:
        return _two_pass_plan(descriptor, params, output_path, config)

    pre_input = []
    warnings = []
    duration = descriptor.duration_seconds

    if operation in STATIC_ARGS:
        args = list(STATIC_ARGS[operation])
    elif operation == Operation.VIDEO_GIF:
        args = ['-vf', f"fps={_num(params.gif_fps)},scale={params.gif_width}:-1:flags=lanczos,"
                       "split[s0][s1];[s0]palettegen[p];[s1][p]paletteuse"]
    elif operation == Operation.IMAGE_JPG:
        args = ['-q:v', str(params.jpg_quality)]
    elif operation == Operation.IMAGE_WEBP:
        args = ['-quality', str(params.webp_quality)]
    elif operation == Operation.IMAGE_RESIZE:
        args = ['-vf', f"scale={_require(params, 'width')}:-1"]
    elif operation == Operation.COMPRESS_CUSTOM_CRF:
        args = ['-c:v', 'libx264', '-crf', str(_require(params, 'crf')), '-preset', 'slow'] + AAC_128
    elif operation == Operation.COMPRESS_GPU:
        gpu_pre, gpu_args = get_gpu_encoder_params(capability, params.gpu_quality, params.hevc, config.vaapi_device)
        pre_input = gpu_pre
        args = gpu_args + AAC_128
    elif operation == Operation.CHANGE_SPEED:
        factor = _require(params, 'speed_factor')
        args = _speed_args(descriptor, factor)
        if duration:
            duration = duration / factor
    elif operation == Operation.CUT_FAST:
        pre_input = ['-ss', _require(params, 'start'), '-to', _require(params, 'end')]
        args = ['-c', 'copy']
        duration = None
    elif operation == Operation.CUT_PRECISE:
        args = ['-ss', _require(params, 'start'), '-to', _require(params, 'end')]
        if descriptor.kind == MediaKind.VIDEO:
            args += H264 + ['-c:a', 'aac']
        duration = None
    elif operation == Operation.CUT_FIRST:
        seconds = _require(params, 'seconds')
        args = ['-t', _num(seconds), '-c', 'copy']
        duration = seconds
    elif operation == Operation.CUT_LAST:
        seconds = _require(params, 'seconds')
        pre_input = ['-sseof', f"-{_num(seconds)}"]
        args = ['-c', 'copy']
        duration = seconds
    elif operation == Operation.SCREENSHOT:
        pre_input = ['-ss', _require(params, 'at_time')]
        args = ['-frames:v', '1']
        duration = None
    elif operation == Operation.CHANGE_FPS:
        args = ['-vf', f"fps={_num(params.fps)}"] + H264 + ['-c:a', 'copy']
    elif operation == Operation.REVERSE:
        args = ['-vf', 'reverse']
        if descriptor.has_audio:
            args += ['-af', 'areverse']
        warnings.append(RAM_WARNING)
    else:
        raise UnsupportedOperation(operation, descriptor.kind)

    return CommandPlan(
        operation=operation,
        input_path=inp,
        output_path=output_path,
        steps=[CommandStep(label=operation.label, args=_ffmpeg(config, inp, args, output_path, pre_input))],
        warnings=warnings,
        duration_seconds=duration,
    )

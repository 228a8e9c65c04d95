"""
FFtool library modules

Command synthesis for an interactive ffmpeg front-end: input probing, speed
decomposition, size budgets, command assembly and supervised execution.
"""

# Import all public interfaces for easy access
from .exceptions import (
    FFToolError, InputNotFound, InvalidFactor, DurationUnknown, BudgetTooSmall,
    UnsupportedOperation, InvalidParameter, MissingCapability, InvalidOutputPath,
    OverwriteDeclined, ExternalProcessFailed,
)
from .operations import MediaKind, Group, Operation, SPEED_PRESETS, operations_in
from .models import (
    MediaDescriptor, EncoderCapability, SpeedPlan, SizeBudget, CommandPlan,
    ExecutionResult, ExecutionState, OperationParams, ToolConfig,
)
from .media_analyzer import discover_media
from .gpu_utils import detect_gpu_acceleration, get_gpu_encoder_params
from .speed import decompose
from .bitrate import compute_budget
from .ffmpeg_builder import build_ffmpeg_cmd, validate_operation
from .processor import execute_plan

__all__ = [
    'FFToolError', 'InputNotFound', 'InvalidFactor', 'DurationUnknown', 'BudgetTooSmall',
    'UnsupportedOperation', 'InvalidParameter', 'MissingCapability', 'InvalidOutputPath',
    'OverwriteDeclined', 'ExternalProcessFailed',
    'MediaKind', 'Group', 'Operation', 'SPEED_PRESETS', 'operations_in',
    'MediaDescriptor', 'EncoderCapability', 'SpeedPlan', 'SizeBudget', 'CommandPlan',
    'ExecutionResult', 'ExecutionState', 'OperationParams', 'ToolConfig',
    'discover_media',
    'detect_gpu_acceleration', 'get_gpu_encoder_params',
    'decompose',
    'compute_budget',
    'build_ffmpeg_cmd', 'validate_operation',
    'execute_plan',
]

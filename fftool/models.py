"""
Pydantic models for probing results, derived parameters and command plans
"""

import re
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import ExternalProcessFailed
from .operations import MediaKind, Operation

TIME_RE = re.compile(r'^(\d+:)?(\d{1,2}:)?\d+(\.\d+)?$')


class MediaDescriptor(BaseModel):
    """What one ffprobe pass learned about the selected input"""
    model_config = ConfigDict(frozen=True)

    path: Path
    kind: MediaKind
    video_codec: Optional[str] = None
    audio_codec: Optional[str] = None
    resolution: Optional[Tuple[int, int]] = None
    duration_seconds: Optional[float] = Field(default=None, ge=0)
    extension: str = ''
    size_bytes: int = Field(default=0, ge=0)
    has_video: bool = False
    has_audio: bool = False
    warning: Optional[str] = None

    @property
    def has_duration(self) -> bool:
        return bool(self.duration_seconds)

    @property
    def resolution_str(self) -> Optional[str]:
        if not self.resolution:
            return None
        return f"{self.resolution[0]}x{self.resolution[1]}"

    @property
    def duration_str(self) -> Optional[str]:
        if not self.has_duration:
            return None
        total = int(self.duration_seconds)
        return f"{total // 3600:02d}:{total % 3600 // 60:02d}:{total % 60:02d}"

    @property
    def size_mb(self) -> float:
        return self.size_bytes / 1048576


class Vendor(Enum):
    NVIDIA = "nvidia"
    VAAPI = "vaapi"
    QSV = "qsv"


class EncoderCapability(BaseModel):
    """Hardware encoder detected once per session"""
    model_config = ConfigDict(frozen=True)

    available: bool = False
    vendor: Optional[Vendor] = None
    encoder_id: Optional[str] = None
    hevc_encoder_id: Optional[str] = None
    display_name: str = ''

    @classmethod
    def unavailable(cls) -> 'EncoderCapability':
        return cls(available=False)


class SpeedPlan(BaseModel):
    """Chain of atempo stages whose product is the requested factor"""
    model_config = ConfigDict(frozen=True)

    factor: float
    stages: List[float] = Field(min_length=1)

    @field_validator('stages')
    @classmethod
    def validate_stages(cls, v):
        for stage in v:
            if not 0.5 <= stage <= 2.0:
                raise ValueError(f'Tempo stage {stage} outside [0.5, 2.0]')
        return v

    @property
    def product(self) -> float:
        result = 1.0
        for stage in self.stages:
            result *= stage
        return result

    def as_filter(self) -> str:
        """Render as an ffmpeg audio filter chain"""
        return ','.join(f"atempo={stage:g}" for stage in self.stages)


class SizeBudget(BaseModel):
    """Bitrate split for a target output size.

    Container and muxing overhead are not modelled, so the resulting file
    size is an estimate (``is_estimate`` is always True).
    """
    model_config = ConfigDict(frozen=True)

    target_size_mb: int
    duration_seconds: int
    total_bitrate_kbps: int
    audio_bitrate_kbps: int
    video_bitrate_kbps: int = Field(gt=0)
    is_estimate: bool = True


class CommandStep(BaseModel):
    """One external invocation"""
    label: str
    args: List[str] = Field(min_length=1)


class CommandPlan(BaseModel):
    """Resolved external invocation(s) for one menu action"""
    operation: Operation
    input_path: Path
    output_path: Optional[Path] = None
    output_dir: Optional[Path] = None
    steps: List[CommandStep] = Field(min_length=1)
    cleanup_paths: List[Path] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    budget: Optional[SizeBudget] = None
    duration_seconds: Optional[float] = None

    @property
    def is_two_pass(self) -> bool:
        return len(self.steps) == 2 and self.budget is not None

    @property
    def commands(self) -> List[List[str]]:
        return [step.args for step in self.steps]


class ExecutionState(Enum):
    BUILT = "built"
    PREVIEWED = "previewed"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ExecutionResult(BaseModel):
    """Outcome of supervising a command plan"""
    state: ExecutionState
    exit_code: Optional[int] = None
    output_size_bytes: Optional[int] = None
    artifact_count: int = 0
    failed_step: Optional[str] = None
    stderr: Optional[str] = None
    steps_run: int = 0
    history: List[ExecutionState] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state == ExecutionState.SUCCEEDED

    @property
    def output_size_mb(self) -> Optional[float]:
        if self.output_size_bytes is None:
            return None
        return round(self.output_size_bytes / 1048576, 2)

    def raise_for_status(self):
        if self.state == ExecutionState.FAILED:
            raise ExternalProcessFailed(self.exit_code, self.stderr, self.failed_step)


class OperationParams(BaseModel):
    """User-supplied parameters; which fields matter depends on the operation"""
    crf: Optional[int] = Field(default=None, ge=0, le=51)
    gpu_quality: int = Field(default=23, ge=0, le=51)
    hevc: bool = False
    target_size_mb: Optional[int] = Field(default=None, gt=0)
    speed_factor: Optional[float] = None
    start: Optional[str] = None
    end: Optional[str] = None
    seconds: Optional[float] = Field(default=None, gt=0)
    at_time: Optional[str] = None
    interval: float = Field(default=5, gt=0)
    width: Optional[int] = Field(default=None, gt=0)
    gif_width: int = Field(default=480, gt=0)
    gif_fps: float = Field(default=15, gt=0)
    fps: float = Field(default=30, gt=0)
    jpg_quality: int = Field(default=5, ge=2, le=31)
    webp_quality: int = Field(default=85, ge=0, le=100)

    @field_validator('start', 'end', 'at_time')
    @classmethod
    def validate_time(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not TIME_RE.match(v):
            raise ValueError(f'Invalid time "{v}" (use seconds or HH:MM:SS)')
        return v


class ToolConfig(BaseModel):
    """Session configuration built from the command line"""
    ffmpeg: str = 'ffmpeg'
    ffprobe: str = 'ffprobe'
    vaapi_device: str = '/dev/dri/renderD128'
    audio_bitrate_kbps: int = Field(default=128, gt=0)
    assume_yes: bool = False
    debug: bool = False
    detect_gpu: bool = True

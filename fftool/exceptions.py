"""
Error types raised while building and running ffmpeg commands

Every error carries a message meant to be shown to the user as-is.
"""

from typing import Optional


class FFToolError(Exception):
    """Base class for all fftool errors"""


class InputNotFound(FFToolError):
    """Selected input file does not exist"""

    def __init__(self, path):
        self.path = path
        super().__init__(f"The file '{path}' does not exist!")


class InvalidFactor(FFToolError):
    """Speed multiplier outside the usable domain"""

    def __init__(self, factor):
        self.factor = factor
        super().__init__(f"Invalid speed multiplier: {factor} (must be a number greater than 0)")


class DurationUnknown(FFToolError):
    """Duration could not be read, so size-based encoding is impossible"""

    def __init__(self, message: str = "Cannot read the file duration"):
        super().__init__(message)


class BudgetTooSmall(FFToolError):
    """Requested target size leaves no bitrate for the video stream"""

    def __init__(self, target_size_mb, video_bitrate_kbps):
        self.target_size_mb = target_size_mb
        self.video_bitrate_kbps = video_bitrate_kbps
        super().__init__(
            f"Target size {target_size_mb} MB is too small for this file "
            f"(video bitrate would be {video_bitrate_kbps}k)"
        )


class UnsupportedOperation(FFToolError):
    """Operation is not valid for the media kind of the input"""

    def __init__(self, operation, kind, reason: Optional[str] = None):
        self.operation = operation
        self.kind = kind
        super().__init__(reason or f"'{operation.label}' is not available for {kind.value} files")


class InvalidParameter(FFToolError):
    """Operation parameter missing or out of range"""


class MissingCapability(FFToolError):
    """Hardware encoding requested but no hardware encoder was detected"""

    def __init__(self, message: str = "No GPU encoder detected! You need NVIDIA + drivers, or AMD/Intel with VAAPI/QSV"):
        super().__init__(message)


class InvalidOutputPath(FFToolError):
    """Output path would overwrite the input"""

    def __init__(self, path):
        self.path = path
        super().__init__(f"The output file cannot be the same as the input file: {path}")


class OverwriteDeclined(FFToolError):
    """User refused to overwrite an existing output; ends the session"""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Not overwriting '{path}'. Interrupted.")


class ExternalProcessFailed(FFToolError):
    """External tool exited with a non-zero code"""

    def __init__(self, exit_code: int, stderr: Optional[str] = None, step: Optional[str] = None):
        self.exit_code = exit_code
        self.stderr = stderr
        self.step = step
        where = f" during {step}" if step else ""
        super().__init__(f"Something went wrong{where} (code: {exit_code})")

"""
File handling utilities and output path safety
"""

import os
from pathlib import Path

from .exceptions import InvalidOutputPath, OverwriteDeclined
from .operations import MediaKind, Operation


def output_extension(operation: Operation, descriptor) -> str:
    """Default output extension for an operation applied to this input"""
    if operation in (Operation.CHANGE_SPEED, Operation.CUT_PRECISE) and descriptor.kind == MediaKind.AUDIO:
        return descriptor.extension or 'mp3'
    ext = operation.info.extension
    if ext is None:
        return descriptor.extension or 'mp4'
    return ext


def suggest_output_path(input_path: Path, ext: str, suffix: str = 'output') -> Path:
    input_path = Path(input_path)
    return input_path.with_name(f"{input_path.stem}_{suffix}.{ext}")


def same_file(a: Path, b: Path) -> bool:
    a, b = Path(a), Path(b)
    if a.exists() and b.exists():
        return os.path.samefile(a, b)
    return a.resolve() == b.resolve()


def ensure_distinct(input_path: Path, output_path: Path):
    """Raise InvalidOutputPath if output would overwrite the input"""
    if same_file(input_path, output_path):
        raise InvalidOutputPath(output_path)


def choose_output_path(input_path: Path, requested, ext: str):
    """Resolve the user's answer to an output path

    Returns (path, substituted). An empty answer picks the suggested name; an
    answer naming the input itself is replaced by ``<stem>_converted.<ext>``.
    """
    requested = (requested or '').strip().strip('"').strip("'")
    if not requested:
        return suggest_output_path(input_path, ext), False

    path = Path(requested).expanduser()
    if same_file(input_path, path):
        return suggest_output_path(input_path, ext, 'converted'), True
    return path, False


def confirm_overwrite(path: Path, ask) -> Path:
    """Ask before reusing an existing output path; declining ends the session"""
    if Path(path).exists() and not ask(path):
        raise OverwriteDeclined(path)
    return path


def screenshot_dir(input_path: Path) -> Path:
    input_path = Path(input_path)
    return input_path.with_name(f"{input_path.stem}_screenshots")


def passlog_prefix(output_path: Path) -> Path:
    """Two-pass statistics file prefix, kept next to the output"""
    output_path = Path(output_path)
    return output_path.with_name(f"{output_path.stem}_2pass")


def passlog_files(prefix: Path):
    prefix = Path(prefix)
    return [prefix.with_name(prefix.name + '-0.log'),
            prefix.with_name(prefix.name + '-0.log.mbtree')]


def remove_files(paths):
    """Remove existing files, return the ones removed"""
    removed = []
    for path in paths:
        path = Path(path)
        if path.exists():
            path.unlink()
            removed.append(path)
    return removed

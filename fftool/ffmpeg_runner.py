"""
Subprocess execution of ffmpeg/ffprobe with progress monitoring
"""

import json
import re
import subprocess
from pathlib import Path

# stats line fields written by ffmpeg to stderr
FPS_RE = re.compile(r'fps=\s*([\d.]+)')
SPEED_RE = re.compile(r'speed=\s*([\d.]+x)')
TIME_RE = re.compile(r'time=(\d+):(\d{2}):(\d{2}(?:\.\d+)?)')


class ProgressMonitor:
    """Tracks the output position reported on ffmpeg's stderr"""

    def __init__(self):
        self.current_time = 0.0
        self.fps = 0.0
        self.speed = ""

    def parse_progress_line(self, line):
        """Feed one stderr line, return True if the position advanced"""
        line = line.strip()
        if not line:
            return False

        match = FPS_RE.search(line)
        if match:
            self.fps = float(match.group(1))
        match = SPEED_RE.search(line)
        if match:
            self.speed = match.group(1)

        # `-progress pipe:2` key=value output
        key, _, value = line.partition('=')
        if key == 'out_time_us':
            if not value.isdigit():
                return False
            self.current_time = int(value) / 1_000_000
            return True

        match = TIME_RE.search(line)
        if not match:
            return False
        h, m, s = match.groups()
        self.current_time = int(h) * 3600 + int(m) * 60 + float(s)
        return True


def run(cmd, show_progress=False, progress_callback=None):
    """Execute command, return (exit_code, stdout, stderr)

    With show_progress the stderr stream is read line by line and every
    position update passes the ProgressMonitor to progress_callback.
    """
    cmd_str = [str(c) for c in cmd]

    if not show_progress:
        p = subprocess.run(cmd_str, stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                           encoding='utf-8', errors='replace')
        return p.returncode, p.stdout, p.stderr

    progress = ProgressMonitor()
    p = subprocess.Popen(cmd_str, stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                         encoding='utf-8', errors='replace')

    stderr_lines = []
    while True:
        stderr_line = p.stderr.readline()
        if stderr_line == '' and p.poll() is not None:
            break
        if stderr_line:
            stderr_lines.append(stderr_line)
            if progress.parse_progress_line(stderr_line) and progress_callback:
                progress_callback(progress)

    stdout, stderr_remaining = p.communicate()
    if stderr_remaining:
        stderr_lines.append(stderr_remaining)

    return p.returncode, stdout or '', ''.join(stderr_lines)


def ffprobe_streams(path: Path, ffprobe='ffprobe'):
    """Get stream information from media file"""
    cmd = [
        ffprobe, '-v', 'error',
        '-show_entries', 'stream=index,codec_type,codec_name,width,height,nb_frames,duration',
        '-of', 'json',
        str(path)
    ]
    code, out, err = run(cmd)
    if code != 0:
        raise RuntimeError(f'ffprobe failed for {path}: {err.strip()}')
    data = json.loads(out or '{}')
    return data.get('streams', [])


def get_duration(path: Path, ffprobe='ffprobe'):
    """Get container duration of media file in seconds"""
    cmd = [
        ffprobe, '-v', 'error',
        '-show_entries', 'format=duration',
        '-of', 'csv=p=0',
        str(path)
    ]
    try:
        code, out, err = run(cmd)
    except OSError:
        return None
    if code != 0:
        return None
    try:
        return float(out.strip())
    except (ValueError, AttributeError):
        return None


def ffprobe_report(path: Path, ffprobe='ffprobe'):
    """Human-readable ffprobe report (printed by ffprobe on stderr)"""
    code, out, err = run([ffprobe, '-hide_banner', str(path)])
    return code, (out or '') + (err or '')


def list_encoders(ffmpeg='ffmpeg'):
    """Raw output of `ffmpeg -encoders`, None when ffmpeg cannot be run"""
    try:
        code, out, err = run([ffmpeg, '-hide_banner', '-encoders'])
    except OSError:
        return None
    if code != 0:
        return None
    return out

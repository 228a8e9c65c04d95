"""
pytest configuration and fixtures for fftool tests

Most tests stub the ffmpeg/ffprobe subprocess calls. Integration tests
synthesise their media with ffmpeg's lavfi sources and are skipped when
ffmpeg/ffprobe are not installed.
"""

import pytest
import tempfile
import shutil
import subprocess
from pathlib import Path
import sys

# Add the project root to path for importing
sys.path.insert(0, str(Path(__file__).parent.parent))
from fftool.models import EncoderCapability, MediaDescriptor, Vendor
from fftool.operations import MediaKind


@pytest.fixture(scope="session")
def check_ffmpeg():
    """Check if ffmpeg is available before running tests"""
    try:
        subprocess.run(['ffmpeg', '-version'], capture_output=True, check=True)
        subprocess.run(['ffprobe', '-version'], capture_output=True, check=True)
    except (subprocess.CalledProcessError, FileNotFoundError):
        pytest.skip("ffmpeg and/or ffprobe not available")


@pytest.fixture
def temp_dirs():
    """Create temporary directories for testing outputs"""
    temp_dir = Path(tempfile.mkdtemp(prefix='fftool_pytest_'))

    dirs = {
        'temp': temp_dir,
        'input': temp_dir / 'input',
        'output': temp_dir / 'output',
    }

    for dir_path in dirs.values():
        dir_path.mkdir(exist_ok=True)

    yield dirs

    # Cleanup
    if temp_dir.exists():
        shutil.rmtree(temp_dir)


@pytest.fixture
def make_descriptor(temp_dirs):
    """Factory for MediaDescriptor objects backed by a real (empty) file"""
    def _make(kind=MediaKind.VIDEO, name=None, has_audio=None, duration=120.0, **kwargs):
        ext = {
            MediaKind.VIDEO: 'mp4', MediaKind.AUDIO: 'mp3',
            MediaKind.IMAGE: 'png', MediaKind.UNKNOWN: 'bin',
        }[kind]
        path = temp_dirs['input'] / (name or f"sample.{ext}")
        path.touch()
        if has_audio is None:
            has_audio = kind in (MediaKind.VIDEO, MediaKind.AUDIO)
        fields = {
            'path': path,
            'kind': kind,
            'extension': path.suffix.lstrip('.'),
            'has_video': kind in (MediaKind.VIDEO, MediaKind.IMAGE),
            'has_audio': has_audio,
            'duration_seconds': duration if kind in (MediaKind.VIDEO, MediaKind.AUDIO) else None,
        }
        fields.update(kwargs)
        return MediaDescriptor(**fields)

    return _make


@pytest.fixture
def video_descriptor(make_descriptor):
    return make_descriptor(MediaKind.VIDEO, video_codec='h264', audio_codec='aac', resolution=(1920, 1080))


@pytest.fixture
def audio_descriptor(make_descriptor):
    return make_descriptor(MediaKind.AUDIO, audio_codec='mp3')


@pytest.fixture
def no_gpu():
    return EncoderCapability.unavailable()


@pytest.fixture
def make_capability():
    """Factory for detected GPU capabilities per vendor"""
    encoders = {
        Vendor.NVIDIA: ('h264_nvenc', 'hevc_nvenc', 'NVIDIA (NVENC)'),
        Vendor.VAAPI: ('h264_vaapi', 'hevc_vaapi', 'VAAPI (AMD/Intel)'),
        Vendor.QSV: ('h264_qsv', 'hevc_qsv', 'Intel QuickSync'),
    }

    def _make(vendor=Vendor.NVIDIA):
        encoder, hevc, name = encoders[vendor]
        return EncoderCapability(available=True, vendor=vendor, encoder_id=encoder,
                                 hevc_encoder_id=hevc, display_name=name)

    return _make


@pytest.fixture(scope="session")
def media_dir(check_ffmpeg, tmp_path_factory):
    """Small synthetic media files generated with lavfi sources"""
    base = tmp_path_factory.mktemp('media')
    specs = {
        'video.mp4': ['-f', 'lavfi', '-i', 'testsrc=size=320x240:rate=25:duration=4',
                      '-f', 'lavfi', '-i', 'sine=frequency=440:duration=4',
                      '-c:v', 'libx264', '-pix_fmt', 'yuv420p', '-c:a', 'aac', '-shortest'],
        'silent.mp4': ['-f', 'lavfi', '-i', 'testsrc=size=320x240:rate=25:duration=4',
                       '-c:v', 'libx264', '-pix_fmt', 'yuv420p'],
        'tone.wav': ['-f', 'lavfi', '-i', 'sine=frequency=440:duration=4', '-c:a', 'pcm_s16le'],
        'still.png': ['-f', 'lavfi', '-i', 'testsrc=size=320x240:rate=1', '-frames:v', '1'],
    }
    for name, args in specs.items():
        result = subprocess.run(['ffmpeg', '-hide_banner', '-y', *args, str(base / name)],
                                capture_output=True, text=True)
        if result.returncode != 0:
            pytest.skip(f"Could not generate {name}: {result.stderr[-200:]}")
    return base

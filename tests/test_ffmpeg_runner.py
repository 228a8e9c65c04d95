"""
Tests for ffmpeg progress parsing and probe helpers
"""

import sys

import pytest
from unittest.mock import patch

from fftool.ffmpeg_runner import ProgressMonitor, ffprobe_streams, get_duration, list_encoders, run


class TestProgressMonitor:

    def test_stats_line(self):
        monitor = ProgressMonitor()
        line = "frame=  250 fps= 50 q=28.0 size=    1024kB time=00:00:25.50 bitrate= 328.9kbits/s speed=2.01x"
        assert monitor.parse_progress_line(line) is True
        assert monitor.current_time == pytest.approx(25.5)
        assert monitor.fps == 50
        assert monitor.speed == '2.01x'

    def test_progress_pipe_format(self):
        monitor = ProgressMonitor()
        assert monitor.parse_progress_line("out_time_us=5000000") is True
        assert monitor.current_time == pytest.approx(5.0)

    def test_long_time_value(self):
        monitor = ProgressMonitor()
        monitor.parse_progress_line("time=01:02:03.5")
        assert monitor.current_time == pytest.approx(3723.5)

    def test_unrelated_lines(self):
        monitor = ProgressMonitor()
        assert monitor.parse_progress_line("") is False
        assert monitor.parse_progress_line("Input #0, mov,mp4,m4a, from 'a.mp4':") is False
        assert monitor.parse_progress_line("time=N/A bitrate=N/A") is False


class TestProbeHelpers:

    def test_streams_parsed(self):
        out = '{"streams": [{"index": 0, "codec_type": "audio", "codec_name": "mp3"}]}'
        with patch('fftool.ffmpeg_runner.run', return_value=(0, out, '')) as mock_run:
            streams = ffprobe_streams('song.mp3', ffprobe='/opt/ffprobe')
        assert streams == [{'index': 0, 'codec_type': 'audio', 'codec_name': 'mp3'}]
        assert mock_run.call_args.args[0][0] == '/opt/ffprobe'

    def test_streams_failure_raises(self):
        with patch('fftool.ffmpeg_runner.run', return_value=(1, '', 'Invalid data found')):
            with pytest.raises(RuntimeError):
                ffprobe_streams('junk.bin')

    def test_duration(self):
        with patch('fftool.ffmpeg_runner.run', return_value=(0, '12.480000\n', '')):
            assert get_duration('a.mp4') == pytest.approx(12.48)

    def test_duration_not_available(self):
        with patch('fftool.ffmpeg_runner.run', return_value=(0, 'N/A\n', '')):
            assert get_duration('a.png') is None

    def test_encoders_missing_binary(self):
        with patch('fftool.ffmpeg_runner.run', side_effect=FileNotFoundError('ffmpeg')):
            assert list_encoders() is None


class TestRunDecoding:
    """Undecodable bytes in ffmpeg output must not abort the run"""

    STDERR_LATIN1 = "import sys; sys.stderr.buffer.write(b'title : caf\\xe9\\ntime=00:00:01.00\\n')"

    def test_plain_run(self):
        code, _, err = run([sys.executable, '-c', self.STDERR_LATIN1])
        assert code == 0
        assert 'caf�' in err

    def test_progress_run(self):
        seen = []
        code, _, err = run([sys.executable, '-c', self.STDERR_LATIN1], show_progress=True,
                           progress_callback=lambda m: seen.append(m.current_time))
        assert code == 0
        assert 'caf�' in err
        assert seen == [1.0]

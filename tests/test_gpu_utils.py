"""
Tests for hardware encoder detection and vendor arguments
"""

import pytest
from unittest.mock import patch

from fftool.gpu_utils import detect_gpu_acceleration, get_gpu_encoder_params
from fftool.models import EncoderCapability, Vendor

ENCODERS_HEADER = """Encoders:
 V..... = Video
 ------
 V....D libx264              libx264 H.264 / AVC / MPEG-4 AVC / MPEG-4 part 10 (codec h264)
"""


def encoders_listing(*names):
    return ENCODERS_HEADER + ''.join(f" V....D {name:<20} hardware encoder\n" for name in names)


class TestDetectGpuAcceleration:

    def test_no_hardware_encoders(self):
        with patch('fftool.gpu_utils.list_encoders', return_value=encoders_listing()):
            capability = detect_gpu_acceleration()
        assert capability.available is False
        assert capability.encoder_id is None

    def test_ffmpeg_unusable(self):
        with patch('fftool.gpu_utils.list_encoders', return_value=None):
            assert detect_gpu_acceleration() == EncoderCapability.unavailable()

    def test_nvenc_preferred_over_others(self):
        listing = encoders_listing('h264_qsv', 'h264_vaapi', 'h264_nvenc', 'hevc_nvenc')
        with patch('fftool.gpu_utils.list_encoders', return_value=listing):
            capability = detect_gpu_acceleration()
        assert capability.vendor == Vendor.NVIDIA
        assert capability.encoder_id == 'h264_nvenc'
        assert capability.hevc_encoder_id == 'hevc_nvenc'

    def test_vaapi_preferred_over_qsv(self):
        listing = encoders_listing('h264_qsv', 'h264_vaapi')
        with patch('fftool.gpu_utils.list_encoders', return_value=listing):
            capability = detect_gpu_acceleration()
        assert capability.vendor == Vendor.VAAPI
        assert capability.display_name == 'VAAPI (AMD/Intel)'

    def test_qsv_only(self):
        with patch('fftool.gpu_utils.list_encoders', return_value=encoders_listing('h264_qsv')):
            capability = detect_gpu_acceleration()
        assert capability.vendor == Vendor.QSV
        assert capability.hevc_encoder_id is None

    def test_custom_ffmpeg_binary_is_used(self):
        with patch('fftool.gpu_utils.list_encoders', return_value=None) as mock_list:
            detect_gpu_acceleration('/opt/ffmpeg/bin/ffmpeg')
        mock_list.assert_called_once_with('/opt/ffmpeg/bin/ffmpeg')


class TestGpuEncoderParams:

    def test_nvenc(self, make_capability):
        pre, args = get_gpu_encoder_params(make_capability(Vendor.NVIDIA), 23)
        assert pre == []
        assert args == ['-c:v', 'h264_nvenc', '-cq', '23', '-preset', 'p4']

    def test_nvenc_hevc(self, make_capability):
        _, args = get_gpu_encoder_params(make_capability(Vendor.NVIDIA), 28, hevc=True)
        assert args[:2] == ['-c:v', 'hevc_nvenc']

    def test_vaapi_needs_device_before_input(self, make_capability):
        pre, args = get_gpu_encoder_params(make_capability(Vendor.VAAPI), 25, vaapi_device='/dev/dri/renderD129')
        assert pre == ['-vaapi_device', '/dev/dri/renderD129']
        assert args == ['-vf', 'format=nv12,hwupload', '-c:v', 'h264_vaapi', '-qp', '25']

    def test_qsv(self, make_capability):
        pre, args = get_gpu_encoder_params(make_capability(Vendor.QSV), 23)
        assert pre == []
        assert args == ['-c:v', 'h264_qsv', '-global_quality', '23', '-preset', 'medium']

    def test_hevc_ignored_without_hevc_encoder(self):
        capability = EncoderCapability(available=True, vendor=Vendor.QSV, encoder_id='h264_qsv',
                                       display_name='Intel QuickSync')
        _, args = get_gpu_encoder_params(capability, 23, hevc=True)
        assert args[1] == 'h264_qsv'

    def test_unavailable(self):
        assert get_gpu_encoder_params(EncoderCapability.unavailable(), 23) == ([], [])

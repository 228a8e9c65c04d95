#!/usr/bin/env python3
"""
FFtool - interactive FFmpeg helper

Menu-driven front-end that turns a few answers into the right ffmpeg
command line, shows it, asks for confirmation and runs it:
- Convert video / audio / image formats
- Compress (CRF presets, resolution, two-pass target size, GPU encoders)
- Change speed, cut, extract audio, screenshots and other extras

Usage:
  python main.py
  python main.py /path/to/file.mp4 [options]
  python main.py video.mkv --no-gpu --debug

Requires: ffmpeg, ffprobe in PATH
"""

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from fftool.dependencies import find_missing_tools, install_hint
from fftool.exceptions import FFToolError, OverwriteDeclined
from fftool.menu import InteractiveShell
from fftool.models import ToolConfig
from fftool.rich_console import rich_output


def parse_arguments(argv=None):
    """Parse and validate command line arguments"""
    ap = argparse.ArgumentParser(description='Interactive FFmpeg helper')
    ap.add_argument('input', type=Path, nargs='?', default=None, help='Input file (asked interactively if omitted)')

    # External tools
    ap.add_argument('--ffmpeg', type=str, default='ffmpeg', help='ffmpeg binary (default: ffmpeg)')
    ap.add_argument('--ffprobe', type=str, default='ffprobe', help='ffprobe binary (default: ffprobe)')
    ap.add_argument('--vaapi-device', type=str, default='/dev/dri/renderD128',
                    help='VAAPI render node (default: /dev/dri/renderD128)')
    ap.add_argument('--no-gpu', action='store_true', help='Skip hardware encoder detection')

    # Encoding
    ap.add_argument('--audio-bitrate', type=int, default=128,
                    help='Audio bitrate in kbps reserved by target size compression (default: 128)')

    # Session
    ap.add_argument('--yes', '-y', action='store_true',
                    help='Run commands without the execute confirmation (overwrites are still asked)')
    ap.add_argument('--debug', action='store_true', help='Show each ffmpeg command and its stderr')

    return ap.parse_args(argv)


def build_config(args) -> ToolConfig:
    try:
        return ToolConfig(
            ffmpeg=args.ffmpeg,
            ffprobe=args.ffprobe,
            vaapi_device=args.vaapi_device,
            audio_bitrate_kbps=args.audio_bitrate,
            assume_yes=args.yes,
            debug=args.debug,
            detect_gpu=not args.no_gpu,
        )
    except ValidationError as e:
        first = e.errors()[0]
        rich_output.print_error(f"Invalid option: {first.get('msg')}")
        sys.exit(2)


def check_dependencies(config: ToolConfig):
    """Exit with status 2 when ffmpeg/ffprobe are missing"""
    missing_cmds, missing_pkgs = find_missing_tools({config.ffmpeg: 'ffmpeg', config.ffprobe: 'ffmpeg'})
    if not missing_cmds:
        return

    rich_output.print_error(f"Missing tools: {', '.join(missing_cmds)}")
    hint = install_hint(missing_pkgs)
    if hint:
        rich_output.print_info(f"Install with: {hint}")
    else:
        rich_output.print_info(f"Install manually: {', '.join(missing_pkgs)}")
    sys.exit(2)


def main(argv=None):
    args = parse_arguments(argv)
    config = build_config(args)
    check_dependencies(config)

    shell = InteractiveShell(config)
    rich_output.print_gpu_info(shell.capability)

    if args.input is not None:
        try:
            shell.select_input(args.input)
        except FFToolError as e:
            rich_output.print_error(str(e))
            sys.exit(1)

    try:
        shell.run()
    except OverwriteDeclined:
        rich_output.print_warning("Interrupted.")
        sys.exit(0)


if __name__ == '__main__':
    main()

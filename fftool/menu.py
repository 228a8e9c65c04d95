"""
Interactive menu session
"""

from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.markup import escape

from .exceptions import ExternalProcessFailed, FFToolError, OverwriteDeclined
from .ffmpeg_builder import build_ffmpeg_cmd, validate_operation
from .ffmpeg_runner import ffprobe_report
from .file_utils import choose_output_path, confirm_overwrite, output_extension, suggest_output_path
from .gpu_utils import detect_gpu_acceleration
from .media_analyzer import discover_media
from .models import EncoderCapability, MediaDescriptor, OperationParams, ToolConfig
from .operations import SPEED_PRESETS, Group, Operation, operations_in
from .processor import ask_user_confirmation, execute_plan
from .rich_console import rich_output, stderr_tail
from .speed import decompose

MAIN_MENU = [
    ('1', Group.CONVERT_VIDEO),
    ('2', Group.CONVERT_AUDIO),
    ('3', Group.CONVERT_IMAGE),
    ('4', Group.COMPRESS),
    ('5', Group.SPEED),
    ('6', Group.CUT),
    ('7', Group.EXTRACT_AUDIO),
    ('8', None),
    ('9', Group.EXTRAS),
]

# prompt text and default for each parameter an operation asks for
PARAM_PROMPTS = {
    Operation.VIDEO_GIF: [('gif_width', "GIF width in px", "480"), ('gif_fps', "FPS", "15")],
    Operation.IMAGE_JPG: [('jpg_quality', "JPG quality (2=best, 31=worst)", "5")],
    Operation.IMAGE_WEBP: [('webp_quality', "WebP quality (0-100)", "85")],
    Operation.IMAGE_RESIZE: [('width', "New width in px (height auto)", None)],
    Operation.COMPRESS_CUSTOM_CRF: [('crf', "CRF value (0=lossless, 23=default, 51=worst)", None)],
    Operation.COMPRESS_TARGET_SIZE: [('target_size_mb', "Target size in MB", None)],
    Operation.COMPRESS_GPU: [('gpu_quality', "Quality CQ (18=great, 28=ok, 35=small)", "23")],
    Operation.CUT_FAST: [('start', "Start time (e.g. 00:01:30 or 90)", None), ('end', "End time (e.g. 00:04:00 or 240)", None)],
    Operation.CUT_PRECISE: [('start', "Start time", None), ('end', "End time", None)],
    Operation.CUT_FIRST: [('seconds', "How many seconds from the start?", None)],
    Operation.CUT_LAST: [('seconds', "How many seconds from the end?", None)],
    Operation.SCREENSHOT: [('at_time', "At what time? (e.g. 00:00:30 or 30)", None)],
    Operation.SCREENSHOT_SERIES: [('interval', "Every how many seconds?", "5")],
    Operation.CHANGE_FPS: [('fps', "New FPS", "30")],
}


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    field = '.'.join(str(part) for part in first.get('loc', ()))
    return f"{field}: {first.get('msg')}" if field else first.get('msg')


class InteractiveShell:
    """One interactive session: cached GPU capability plus the current input"""

    def __init__(self, config: Optional[ToolConfig] = None, capability: Optional[EncoderCapability] = None,
                 output=rich_output):
        self.config = config or ToolConfig()
        self.output = output
        if capability is None:
            if self.config.detect_gpu:
                capability = detect_gpu_acceleration(self.config.ffmpeg)
            else:
                capability = EncoderCapability.unavailable()
        self.capability = capability
        self.descriptor: Optional[MediaDescriptor] = None

    # ── input / output ──────────────────────────────────
    def select_input(self, path=None) -> MediaDescriptor:
        """Probe a new input; the previous one stays selected if this fails"""
        if path is None:
            path = self.output.ask("Input file (path or name)")
        path = Path(str(path).strip().strip('"').strip("'")).expanduser()

        descriptor = discover_media(path, self.config.ffprobe)
        self.descriptor = descriptor
        self.output.divider()
        self.output.print_media_info(descriptor)
        self.output.divider()
        return descriptor

    def ensure_input(self) -> MediaDescriptor:
        if self.descriptor is None:
            return self.select_input()
        return self.descriptor

    def ask_output_path(self, operation: Operation) -> Path:
        ext = output_extension(operation, self.descriptor)
        suggested = suggest_output_path(self.descriptor.path, ext)
        answer = self.output.ask(escape(f"Output file [{suggested}]"), default="")

        path, substituted = choose_output_path(self.descriptor.path, answer, ext)
        if substituted:
            self.output.print_error("The output file cannot be the same as the input file!")
            self.output.print_warning(f"Changed to: {path}")

        return confirm_overwrite(
            path, lambda p: self.output.ask_confirmation(f"File '{p}' exists. Overwrite?", default=False))

    def ask_params(self, operation: Operation, **values) -> OperationParams:
        for field, prompt, default in PARAM_PROMPTS.get(operation, []):
            values[field] = self.output.ask(prompt, default=default)
        if operation == Operation.COMPRESS_GPU and self.capability.hevc_encoder_id:
            values['hevc'] = self.output.ask_confirmation(
                f"Use HEVC ({self.capability.hevc_encoder_id})?", default=False)
        return OperationParams(**values)

    # ── operations ──────────────────────────────────────
    def run_operation(self, operation: Operation, params: Optional[OperationParams] = None):
        """Ask for everything an operation needs, then build and execute it"""
        descriptor = self.ensure_input()
        validate_operation(operation, descriptor, self.capability)

        if operation == Operation.COMPRESS_GPU:
            self.output.print_info(f"Encoder: {self.capability.display_name}")
        if params is None:
            params = self.ask_params(operation)

        output_path = None
        if operation != Operation.SCREENSHOT_SERIES:
            output_path = self.ask_output_path(operation)

        plan = build_ffmpeg_cmd(operation, descriptor, self.capability, params, output_path, self.config)
        if plan.budget:
            self.output.print_budget(plan.budget)

        confirm = (lambda p: True) if self.config.assume_yes else ask_user_confirmation
        result = execute_plan(plan, confirm, self.config.debug)
        result.raise_for_status()
        if result.succeeded:
            self.output.print_result(plan, result)
        return result

    def show_info(self):
        descriptor = self.ensure_input()
        code, report = ffprobe_report(descriptor.path, self.config.ffprobe)
        self.output.print_report(report)
        if code != 0:
            self.output.print_warning(f"ffprobe exited with code {code}")

    # ── menus ───────────────────────────────────────────
    def _operation_options(self, group: Group):
        options = []
        number = 1
        for op in operations_in(group):
            if op == Operation.COMPRESS_GPU:
                if self.capability.available:
                    label = f"{op.label} ({self.capability.display_name} detected)"
                else:
                    label = f"{op.label} (not available)"
                options.append(('g', label, op))
                continue
            options.append((str(number), op.label, op))
            number += 1
        return options

    def group_menu(self, group: Group):
        self.ensure_input()
        if group == Group.SPEED:
            return self.speed_menu()

        options = self._operation_options(group)
        self.output.print_menu(group.value, [(key, label) for key, label, _ in options] + [('0', "<- Back")])
        choice = self.output.ask_choice()
        if choice == '0':
            return None
        for key, _, op in options:
            if key == choice:
                return self.run_operation(op)
        self.output.print_warning("Unknown option")
        return None

    def speed_menu(self):
        validate_operation(Operation.CHANGE_SPEED, self.descriptor, self.capability)
        options = [(key, label) for key, label, _ in SPEED_PRESETS]
        self.output.print_menu(Group.SPEED.value, options + [('c', "Custom multiplier"), ('0', "<- Back")])
        choice = self.output.ask_choice()
        if choice == '0':
            return None
        if choice == 'c':
            factor = self.output.ask("Multiplier (e.g. 1.3 = +30%, 0.8 = -20%)")
        else:
            factor = next((f for key, _, f in SPEED_PRESETS if key == choice), None)
            if factor is None:
                self.output.print_warning("Unknown option")
                return None
        plan = decompose(factor)
        params = OperationParams(speed_factor=plan.factor)
        self.output.print_info(f"Audio filter: {plan.as_filter()}")
        return self.run_operation(Operation.CHANGE_SPEED, params)

    def handle_choice(self, choice: str) -> bool:
        """Dispatch one main menu choice, return False to quit"""
        if choice == 'q':
            self.output.print_success("See you!")
            return False
        if choice == 'f':
            self.select_input()
            return True
        for key, group in MAIN_MENU:
            if key == choice:
                if group is None:
                    self.show_info()
                else:
                    self.group_menu(group)
                return True
        self.output.print_warning("Unknown option")
        return True

    def print_main_menu(self):
        self.output.print_header("FFtool - FFmpeg Helper")
        if self.descriptor:
            self.output.console.print(f"  File: [green]{escape(str(self.descriptor.path))}[/green]")
        if self.capability.available:
            self.output.console.print(f"  GPU:  [green]{self.capability.display_name}[/green]")
        options = [(key, group.value if group else "File info") for key, group in MAIN_MENU]
        options += [('f', "Change input file"), ('q', "Quit")]
        self.output.print_menu("What do you want to do?", options)

    def run(self):
        """Main loop; OverwriteDeclined ends the session"""
        while True:
            self.print_main_menu()
            choice = self.output.ask_choice()
            try:
                if not self.handle_choice(choice):
                    return
            except OverwriteDeclined:
                raise
            except ExternalProcessFailed as e:
                self.output.print_error(str(e), stderr_tail(e.stderr))
            except FFToolError as e:
                self.output.print_error(str(e))
            except ValidationError as e:
                self.output.print_error(f"Invalid value - {_validation_message(e)}")
            except OSError as e:
                # ffprobe/ffmpeg missing or output directory not writable
                self.output.print_error(str(e))
            self.output.pause()

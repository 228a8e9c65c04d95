"""
Rich console output, prompts and progress tracking
"""

import shlex
from typing import List, Optional, Tuple

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    Progress, SpinnerColumn, TextColumn, BarColumn,
    TaskProgressColumn, TimeElapsedColumn, TimeRemainingColumn
)
from rich.prompt import Confirm, Prompt
from rich.table import Table

from .models import CommandPlan, EncoderCapability, ExecutionResult, MediaDescriptor, SizeBudget
from .operations import MediaKind

# Global console instance
console = Console()


class RichOutput:
    """Rich console output manager"""

    def __init__(self):
        self.console = console

    def print_header(self, title: str):
        """Print application header"""
        self.console.print(Panel.fit(
            f"[bold cyan]{title}[/bold cyan]",
            box=box.DOUBLE,
            border_style="cyan"
        ))

    def divider(self):
        self.console.rule(style="cyan")

    def print_media_info(self, descriptor: MediaDescriptor):
        """Print a summary of the selected input"""
        table = Table(show_header=False, box=box.ROUNDED)
        table.add_column("Property", style="cyan", width=12)
        table.add_column("Value", style="white")

        table.add_row("File", escape(str(descriptor.path)))
        table.add_row("Size", f"{descriptor.size_mb:.2f} MB")

        if descriptor.kind == MediaKind.VIDEO:
            codecs = descriptor.video_codec or '?'
            if descriptor.has_audio:
                codecs += f" + {descriptor.audio_codec}"
            else:
                codecs += ", no audio"
            table.add_row("Type", f"Video ({codecs})")
        elif descriptor.kind == MediaKind.AUDIO:
            table.add_row("Type", f"Audio ({descriptor.audio_codec})")
        elif descriptor.kind == MediaKind.IMAGE:
            table.add_row("Type", f"Image ({descriptor.video_codec})")
        else:
            table.add_row("Type", "[red]Unknown[/red]")

        if descriptor.resolution_str:
            table.add_row("Resolution", descriptor.resolution_str)
        if descriptor.duration_str:
            table.add_row("Duration", descriptor.duration_str)

        self.console.print(table)
        if descriptor.warning:
            self.print_warning(descriptor.warning)

    def print_gpu_info(self, capability: EncoderCapability):
        """Print GPU acceleration info"""
        if capability.available:
            self.console.print(f"[bold green]GPU encoder detected:[/bold green] "
                               f"{capability.display_name} ({capability.encoder_id})")
        else:
            self.console.print("[yellow]No GPU encoder detected - GPU compress unavailable[/yellow]")

    def print_budget(self, budget: SizeBudget):
        self.print_info(f"Calculated video bitrate: {budget.video_bitrate_kbps}k "
                        f"(audio: {budget.audio_bitrate_kbps}k, estimate)")
        self.print_info("Using 2-pass encoding...")

    def print_command_plan(self, plan: CommandPlan):
        """Preview every command of a plan"""
        for warning in plan.warnings:
            self.print_warning(warning)
        for step in plan.steps:
            title = "Command" if len(plan.steps) == 1 else step.label
            self.console.print(Panel(
                escape(shlex.join(step.args)),
                title=f"[bold yellow]{title}[/bold yellow]",
                border_style="yellow"
            ))

    def print_command_start(self, args: List[str]):
        self.console.print(f"[dim]$ {escape(shlex.join(args))}[/dim]")

    def print_result(self, plan: CommandPlan, result: ExecutionResult):
        """Print the outcome of a successfully executed plan"""
        target = plan.output_dir if plan.output_dir else plan.output_path
        self.print_success(f"Done! -> {target}")
        if result.output_size_bytes is None:
            return
        size = f"{result.output_size_mb:.2f} MB"
        if plan.output_dir:
            self.print_success(f"{result.artifact_count} files, {size}")
        elif plan.budget:
            self.print_success(f"Size: {size} (target: {plan.budget.target_size_mb} MB)")
        else:
            self.print_success(f"Output size: {size}")

    def print_report(self, text: str):
        self.divider()
        self.console.print(escape(text.rstrip()))
        self.divider()

    def print_menu(self, title: str, options: List[Tuple[str, str]]):
        """Print a numbered menu"""
        self.console.print(f"\n[bold]{title}[/bold]")
        for key, label in options:
            self.console.print(f"  [bold]{key}[/bold]) {label}")
        self.console.print()

    def create_progress_bar(self, total_duration: Optional[float] = None) -> Progress:
        """Create and return a progress bar for FFmpeg processing"""
        if total_duration:
            # Time-based progress for FFmpeg
            return Progress(
                SpinnerColumn(),
                TextColumn("[bold blue]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                TimeElapsedColumn(),
                TimeRemainingColumn(),
                console=self.console
            )
        # Indeterminate progress
        return Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            TimeElapsedColumn(),
            console=self.console
        )

    def print_success(self, message: str = "Processing completed!"):
        """Print success message"""
        self.console.print(f"[bold green]✓ {escape(message)}[/bold green]")

    def print_error(self, message: str, details: Optional[str] = None):
        """Print error message"""
        self.console.print(f"[bold red]✗ {escape(message)}[/bold red]")
        if details:
            self.console.print(f"[red]Details: {escape(details)}[/red]")

    def print_warning(self, message: str):
        """Print warning message"""
        self.console.print(f"[bold yellow]⚠ {escape(message)}[/bold yellow]")

    def print_info(self, message: str):
        """Print info message"""
        self.console.print(f"[bold cyan]ℹ {escape(message)}[/bold cyan]")

    def ask(self, prompt: str, default: Optional[str] = None) -> str:
        """Free-text prompt"""
        if default is None:
            return Prompt.ask(f"[blue]?[/blue] {prompt}", console=self.console)
        return Prompt.ask(f"[blue]?[/blue] {prompt}", default=default, show_default=bool(default),
                          console=self.console)

    def ask_choice(self, prompt: str = "Choice") -> str:
        return self.ask(prompt).strip().lower()

    def ask_confirmation(self, prompt: str = "Execute?", default: bool = True) -> bool:
        """Ask user for a yes/no confirmation"""
        return Confirm.ask(f"[blue]?[/blue] {prompt}", default=default, console=self.console)

    def pause(self, prompt: str = "Press Enter to go back to menu..."):
        Prompt.ask(f"[blue]?[/blue] {prompt}", default="", show_default=False, console=self.console)


def stderr_tail(stderr: Optional[str], lines: int = 10) -> Optional[str]:
    if not stderr:
        return None
    return '\n'.join(stderr.strip().splitlines()[-lines:])


# Global rich output instance
rich_output = RichOutput()

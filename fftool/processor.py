"""
Command plan execution: preview, confirmation, sequential run and report
"""

from pathlib import Path

from .ffmpeg_runner import run
from .file_utils import remove_files
from .models import CommandPlan, CommandStep, ExecutionResult, ExecutionState
from .rich_console import rich_output, stderr_tail


def ask_user_confirmation(plan: CommandPlan) -> bool:
    return rich_output.ask_confirmation("Execute?")


def progress_description(label: str, monitor) -> str:
    """Progress bar text: step label plus ffmpeg's current fps and speed"""
    parts = [label]
    if monitor.fps:
        parts.append(f"{monitor.fps:g} fps")
    if monitor.speed:
        parts.append(monitor.speed)
    return ' | '.join(parts)


def _run_step(step: CommandStep, duration, debug: bool):
    """Run one command with a progress bar, return (exit_code, stderr)"""
    if debug:
        rich_output.print_command_start(step.args)

    with rich_output.create_progress_bar(duration) as progress:
        task = progress.add_task(step.label, total=duration or None)
        try:
            code, _, err = run(step.args, show_progress=True, progress_callback=lambda m: progress.update(
                task, completed=m.current_time, description=progress_description(step.label, m)))
        except OSError as e:
            # binary missing or not executable
            return 127, str(e)
        if code == 0 and duration:
            progress.update(task, completed=duration)

    if debug and err:
        rich_output.print_info(stderr_tail(err))
    return code, err


def _artifact_size(plan: CommandPlan):
    """Return (size_bytes, count) of what the plan produced, size None if nothing found"""
    if plan.output_dir:
        files = [p for p in Path(plan.output_dir).glob('thumb_*.png') if p.is_file()]
        if not files:
            return None, 0
        return sum(p.stat().st_size for p in files), len(files)
    if plan.output_path and Path(plan.output_path).is_file():
        return Path(plan.output_path).stat().st_size, 1
    return None, 0


def execute_plan(plan: CommandPlan, confirm=ask_user_confirmation, debug: bool = False) -> ExecutionResult:
    """Preview, confirm and run a command plan

    Commands run strictly in order; the first non-zero exit code stops the
    plan and is preserved in the result. Pass-log files are removed only
    after the whole plan succeeded.
    """
    history = [ExecutionState.BUILT]

    rich_output.print_command_plan(plan)
    history.append(ExecutionState.PREVIEWED)

    if not confirm(plan):
        history.append(ExecutionState.DECLINED)
        rich_output.print_warning("Cancelled.")
        return ExecutionResult(state=ExecutionState.DECLINED, history=history)
    history.append(ExecutionState.CONFIRMED)

    if plan.output_dir:
        Path(plan.output_dir).mkdir(parents=True, exist_ok=True)

    rich_output.print_info("Launching...")
    history.append(ExecutionState.RUNNING)
    steps_run = 0
    for step in plan.steps:
        code, err = _run_step(step, plan.duration_seconds, debug)
        steps_run += 1
        if code != 0:
            history.append(ExecutionState.FAILED)
            return ExecutionResult(
                state=ExecutionState.FAILED, exit_code=code, failed_step=step.label,
                stderr=err, steps_run=steps_run, history=history,
            )

    if plan.cleanup_paths:
        remove_files(plan.cleanup_paths)

    size, count = _artifact_size(plan)
    history.append(ExecutionState.SUCCEEDED)
    return ExecutionResult(
        state=ExecutionState.SUCCEEDED, exit_code=0, output_size_bytes=size,
        artifact_count=count, steps_run=steps_run, history=history,
    )

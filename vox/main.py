"""Main application entry point for Vox."""

import asyncio
import logging
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
from pydantic import BaseModel
from rich.console import Console

from . import __version__
from .audio.capture import Recorder
from .config import VoxConfig
from .errors import LocalIOError, VoxError
from .models.session import SessionOutcome, SessionState
from .services.clipboard import Clipboard
from .services.session_controller import SessionController
from .storage.files import create_temp_file, discard_file
from .storage.history import HistoryStore
from .transcription.openai_backend import OpenAITranscriptionBackend
from .transcription.orchestrator import TranscriptionOrchestrator
from .ui.display import make_console
from .ui.format import relative_time, truncate

logger = logging.getLogger(__name__)


def setup_logging(config: VoxConfig, level: Optional[str] = None) -> None:
    """Set up logging configuration from YAML config."""
    level = (level or config.get('logging.level', 'INFO')).upper()
    log_file_path = config.get_log_file_path()
    console_output = config.get('logging.console_output', False)

    handlers = []

    # File handler - always write to file when the directory is usable
    try:
        Path(log_file_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path)
    except OSError as e:
        print(f"Warning: cannot write log file {log_file_path}: {e}", file=sys.stderr)
    else:
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
        ))
        handlers.append(file_handler)

    # Console handler - only if enabled in config; stdout carries transcripts
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level, logging.INFO))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info("=" * 50)
    logger.info(f"Vox {__version__} starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("=" * 50)


@dataclass
class AppContext:
    """Objects shared by all subcommands."""
    config: VoxConfig
    console: Console

    def history(self) -> HistoryStore:
        return HistoryStore(self.config.get_history_path())

    def controller(self) -> SessionController:
        config = self.config
        backend = OpenAITranscriptionBackend(
            api_key=config.get_api_key() or "",
            model=config.get('openai.model'),
            base_url=config.get('openai.base_url'),
            timeout_seconds=float(config.get('openai.timeout_seconds')),
        )
        recorder = Recorder(
            sample_rate=int(config.get('recording.sample_rate')),
            channels=int(config.get('recording.channels')),
            bit_depth=int(config.get('recording.bit_depth')),
            grace_seconds=float(config.get('recording.grace_seconds')),
            bar_width=int(config.get('recording.bar_width')),
        )
        return SessionController(
            recorder=recorder,
            orchestrator=TranscriptionOrchestrator(backend),
            clipboard=Clipboard(),
            history=self.history(),
            console=self.console,
        )


class FileResult(BaseModel):
    """JSON payload printed by ``vox file --json``."""
    text: str = ""
    duration_s: float = 0.0
    chunks: int = 0
    error: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: SessionOutcome) -> "FileResult":
        return cls(
            text=outcome.text,
            duration_s=outcome.duration_seconds,
            chunks=outcome.chunks,
            error=outcome.message or None,
        )


def _report_failure(outcome: SessionOutcome) -> None:
    if outcome.text:
        # Partial transcript from the segments that succeeded.
        click.echo(outcome.text)
    click.echo(f"Error: {outcome.message}", err=True)


@click.group(invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--config", "config_path", type=click.Path(dir_okay=False),
              help="Path to configuration YAML file (default: ~/.vox/config.yaml)")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              default=None, help="Override the configured log level")
@click.version_option(__version__, "--version", "-v", prog_name="vox", message="%(prog)s v%(version)s")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], log_level: Optional[str]) -> None:
    """Record your voice, transcribe it, and copy the text to the clipboard.

    Run without a command to start recording; press Enter or Ctrl+C to stop,
    Ctrl+C again to abort transcription.
    """
    try:
        config = VoxConfig(config_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    setup_logging(config, log_level)
    ctx.obj = AppContext(config=config, console=make_console())

    if ctx.invoked_subcommand is None:
        ctx.exit(_run_recording(ctx.obj))


def _run_recording(app: AppContext) -> int:
    outcome = asyncio.run(app.controller().record_and_transcribe())
    if outcome.ok:
        return 0
    if outcome.state == SessionState.ABORTED:
        click.echo("Cancelled.", err=True)
    else:
        _report_failure(outcome)
    return outcome.exit_code


@cli.command("file")
@click.argument("path")
@click.option("--json", "json_mode", is_flag=True, help="Print a JSON result to stdout; skip clipboard and history")
@click.option("--format", "audio_format", default="ogg", show_default=True,
              help="Container extension used when reading audio from stdin")
@click.pass_obj
def file_command(app: AppContext, path: str, json_mode: bool, audio_format: str) -> None:
    """Transcribe an audio file, or stdin when PATH is '-'."""
    temp_path = None
    try:
        if path == "-":
            try:
                temp_path = create_temp_file(prefix="vox-stdin-", suffix=f".{audio_format.lstrip('.')}")
                with open(temp_path, 'wb') as f:
                    shutil.copyfileobj(sys.stdin.buffer, f)
            except (LocalIOError, OSError) as e:
                _exit_file_error(json_mode, f"reading stdin: {e}")
            path = temp_path

        outcome = asyncio.run(
            app.controller().transcribe_file(path, deliver=not json_mode, show_progress=not json_mode)
        )
    finally:
        discard_file(temp_path)

    if json_mode:
        click.echo(FileResult.from_outcome(outcome).model_dump_json(exclude_none=True))
    elif outcome.ok:
        click.echo(outcome.text)
    else:
        _report_failure(outcome)
    sys.exit(outcome.exit_code)


def _exit_file_error(json_mode: bool, message: str) -> None:
    if json_mode:
        click.echo(FileResult(error=message).model_dump_json(exclude_none=True))
    else:
        click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@cli.command("ls")
@click.option("-n", "limit", type=click.IntRange(min=1), default=20, show_default=True,
              help="Number of entries to show")
@click.option("--all", "show_all", is_flag=True, help="Show every entry")
@click.pass_obj
def ls_command(app: AppContext, limit: int, show_all: bool) -> None:
    """List recent transcriptions, newest first."""
    entries = _load_history(app, 0 if show_all else limit)
    if not entries:
        click.echo("No history yet.", err=True)
        return

    click.echo(f"{'#':<4}{'When':<12}Text")
    for i, entry in enumerate(entries, start=1):
        click.echo(f"{i:<4}{relative_time(entry.timestamp):<12}{truncate(entry.text, 60)}")


@cli.command("cp")
@click.argument("number", type=int)
@click.pass_obj
def cp_command(app: AppContext, number: int) -> None:
    """Copy history entry NUMBER (1 = most recent) to the clipboard."""
    entry = _get_entry(app, number)
    clipboard = Clipboard()
    if not clipboard.available():
        click.echo("Warning: no display or clipboard tool detected, copy may fail", err=True)
    try:
        clipboard.write(entry.text)
    except VoxError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(e.exit_code)
    click.echo(f"✓ Copied #{number} to clipboard", err=True)


@cli.command("show")
@click.argument("number", type=int)
@click.pass_obj
def show_command(app: AppContext, number: int) -> None:
    """Print history entry NUMBER in full."""
    entry = _get_entry(app, number)
    click.echo(f"[{relative_time(entry.timestamp)}]\n", err=True)
    click.echo(entry.text)


@cli.command("clear")
@click.pass_obj
def clear_command(app: AppContext) -> None:
    """Delete the whole transcription history."""
    entries = _load_history(app, 0)
    if not entries:
        click.echo("No history to clear.", err=True)
        return

    if click.confirm(f"Delete all {len(entries)} transcriptions?", default=False, err=True):
        try:
            app.history().clear()
        except OSError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)
        click.echo("✓ History cleared", err=True)
    else:
        click.echo("Cancelled.", err=True)


def _load_history(app: AppContext, n: int):
    try:
        return app.history().list(n)
    except (OSError, ValueError) as e:
        click.echo(f"Error: reading history: {e}", err=True)
        sys.exit(1)


def _get_entry(app: AppContext, number: int):
    try:
        return app.history().get(number)
    except IndexError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except (OSError, ValueError) as e:
        click.echo(f"Error: reading history: {e}", err=True)
        sys.exit(1)


def main() -> None:
    """Main entry point for Vox application."""
    cli(prog_name="vox")


if __name__ == "__main__":
    main()

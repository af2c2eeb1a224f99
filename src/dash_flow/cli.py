"""CLI interface for dash-flow."""

import logging
import sys
from pathlib import Path
from typing import Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, TaskID, TextColumn, TimeElapsedColumn
from rich.table import Table

from .animation_pipeline import PIPELINE_STEPS, encode_animation, frame_delay_ms
from .animator.rasterizer import CairoSvgRasterizer
from .animator.scene import VectorScene, load_scene_file
from .animator.speed import (
    SPEED_PRESETS,
    SpeedCurveMapper,
    find_closest_preset,
    format_duration,
    format_speed,
)
from .config import AnimationConfig, EncoderOptions
from .constants import (
    DEFAULT_BACKGROUND,
    DEFAULT_COLOR_FROM,
    DEFAULT_COLOR_TO,
    DEFAULT_FPS,
    DEFAULT_GLINT_SPEED,
    DEFAULT_WAVE_BAND_WIDTH,
    DEFAULT_WAVE_FREQUENCY,
)
from .errors import DashFlowError, InvalidSceneError
from .output import OutputProvider, resolve_output_provider, supported_output_formats
from .progress import ProgressState, ProgressTracker, StepStatus

# Load environment variables from .env file
load_dotenv()

console = Console()
err_console = Console(stderr=True)
SUPPORTED_OUTPUT_FORMATS_TEXT = ", ".join(supported_output_formats()).upper()


class CLIError(Exception):
    """Base exception for CLI errors with user-friendly messages."""
    pass


def main(
    input_path: str = typer.Argument(None, help="SVG file containing dashed strokes"),
    out: str = typer.Option(
        None,
        "--output",
        "-o",
        help=f"Output animation path ({SUPPORTED_OUTPUT_FORMATS_TEXT})",
    ),
    speed: float | None = typer.Option(
        None,
        "--speed",
        help="Speed multiplier (higher is faster)",
    ),
    slider: float | None = typer.Option(
        None,
        "--slider",
        help="Speed as a 0-100 slider position",
    ),
    fps: int = typer.Option(DEFAULT_FPS, "--fps", help="Frames per second for the animation"),
    color_from: str = typer.Option(DEFAULT_COLOR_FROM, "--color-from", help="Base stroke color"),
    color_to: str = typer.Option(DEFAULT_COLOR_TO, "--color-to", help="Highlight color"),
    glint: bool = typer.Option(False, "--glint", help="Sweep a glint along each path"),
    gradient_wave: bool = typer.Option(
        False,
        "--gradient-wave",
        help="Scroll a color wave across the strokes (ignored with --glint)",
    ),
    wave_frequency: float = typer.Option(
        DEFAULT_WAVE_FREQUENCY,
        "--wave-frequency",
        help="Wave cycles across the scene width",
    ),
    wave_band_width: float = typer.Option(
        DEFAULT_WAVE_BAND_WIDTH,
        "--wave-band-width",
        help="Width of the highlight band (0-1)",
    ),
    glint_speed: float = typer.Option(
        DEFAULT_GLINT_SPEED,
        "--glint-speed",
        help="Glint speed multiplier (0-1]",
    ),
    stroke_width: float | None = typer.Option(
        None,
        "--stroke-width",
        help="Override the stroke width of every dashed path",
    ),
    background: str = typer.Option(DEFAULT_BACKGROUND, "--background", help="Background color"),
    quality: int | None = typer.Option(
        None,
        "--quality",
        help="Palette sampling interval, 1 is best (default: $DASH_FLOW_ENCODER_QUALITY or 10)",
    ),
    workers: int | None = typer.Option(
        None,
        "--workers",
        help="Encoder worker threads (default: $DASH_FLOW_ENCODER_WORKERS or 2)",
    ),
    dither: bool = typer.Option(False, "--dither", help="Dither frames while quantizing"),
    global_palette: bool = typer.Option(
        True,
        "--global-palette/--per-frame-palette",
        help="Share one palette across all GIF frames",
    ),
    transparent: bool = typer.Option(
        False,
        "--transparent",
        help="Make the background color transparent",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    list_presets: bool = typer.Option(False, "--list-presets", help="Show speed presets and exit"),
) -> None:
    """
    Animate the dashed strokes of an SVG scene into a looping GIF or WebP.

    Examples:
      # Flowing dashes at the default speed
      dash-flow diagram.svg

      # Slow glint sweep, written as WebP
      dash-flow diagram.svg --glint --speed 0.5 -o diagram.webp
    """
    _configure_logging(verbose)
    try:
        if list_presets:
            _print_presets()
            return

        if not input_path:
            raise CLIError("Input SVG file is required")
        if speed is not None and slider is not None:
            raise CLIError("Cannot specify both --speed and --slider. Choose one.")

        mapper = SpeedCurveMapper()
        resolved_speed = _resolve_speed(mapper, speed, slider)
        out = out or f"{Path(input_path).stem}-flow.gif"

        config = _build_config(
            speed=resolved_speed,
            color_from=color_from,
            color_to=color_to,
            use_glint_overlay=glint,
            use_gradient_wave=gradient_wave,
            wave_frequency=wave_frequency,
            wave_band_width=wave_band_width,
            glint_speed=glint_speed,
            stroke_width=stroke_width,
            background=background,
        )
        options = _build_encoder_options(
            quality=quality,
            workers=workers,
            dither=dither,
            global_palette=global_palette,
            transparent=transparent,
            background=background,
        )

        scene = _load_scene(input_path)
        _generate_output(scene, config, options, mapper, out, fps)

    except CLIError as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)

    except DashFlowError as e:
        stage = f" ({e.stage})" if e.stage else ""
        err_console.print(f"[bold red]Error{stage}:[/bold red] {e}")
        sys.exit(1)

    except Exception as e:
        err_console.print(f"[bold red]Unexpected error:[/bold red] {e}")
        sys.exit(1)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _print_presets() -> None:
    table = Table(title="Speed presets")
    table.add_column("Preset", style="bold")
    table.add_column("Speed", justify="right")
    table.add_column("Cycle", justify="right")
    table.add_column("Description")
    for preset in SPEED_PRESETS:
        table.add_row(
            preset.name,
            format_speed(preset.value),
            format_duration(preset.duration),
            preset.description,
        )
    console.print(table)


def _resolve_speed(mapper: SpeedCurveMapper, speed: float | None, slider: float | None) -> float:
    if slider is not None:
        return mapper.slider_to_speed(slider)
    if speed is not None:
        if speed <= 0:
            raise CLIError(f"--speed must be positive (got {speed})")
        return mapper.clamp_speed(speed)
    return mapper.config.default


def _build_config(**values: object) -> AnimationConfig:
    try:
        return AnimationConfig(**values)  # type: ignore[arg-type]
    except ValueError as e:
        raise CLIError(str(e))


def _build_encoder_options(**values: object) -> EncoderOptions:
    try:
        return EncoderOptions.from_env(**values)
    except ValueError as e:
        raise CLIError(str(e))


def _load_scene(file_path: str) -> VectorScene:
    """Load the SVG scene from disk."""
    console.print(f"[bold blue]Loading scene from {file_path}...[/bold blue]")
    try:
        scene = load_scene_file(file_path)
    except FileNotFoundError:
        raise CLIError(f"File '{file_path}' not found")
    except InvalidSceneError as e:
        raise CLIError(f"Invalid scene '{file_path}': {e}")
    console.print(
        f"[green]✓[/green] {len(scene.paths)} dashed path(s), {scene.width}x{scene.height}px"
    )
    return scene


def _generate_output(
    scene: VectorScene,
    config: AnimationConfig,
    options: EncoderOptions,
    mapper: SpeedCurveMapper,
    output_path: str,
    fps: int,
) -> None:
    """Render and encode the animation in the format given by output_path."""
    if fps <= 0:
        raise CLIError(f"--fps must be positive (got {fps})")
    provider = _resolve_provider(output_path)
    # Warn about GIF FPS limitation
    if output_path.lower().endswith(".gif") and fps > 50:
        console.print(
            f"[yellow]Warning:[/yellow] FPS > 50 may not display correctly in browsers "
            f"(GIF delay will be {frame_delay_ms(fps)}ms, but browsers clamp delays < 20ms to ~100ms)"
        )

    frame_count = mapper.frame_count(config.speed, fps)
    preset = find_closest_preset(config.speed)
    console.print(
        f"Speed {format_speed(config.speed)} (closest preset: {preset.name}), "
        f"{frame_count} frames, {format_duration(mapper.duration(config.speed))} per cycle"
    )

    ext = Path(output_path).suffix[1:].upper()
    console.print(f"\n[bold blue]Generating {ext} animation...[/bold blue]")

    tracker = ProgressTracker()
    with Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        tasks = {
            step_id: progress.add_task(name, total=100) for step_id, name in PIPELINE_STEPS
        }
        unsubscribe = tracker.subscribe(lambda state: _show_progress(progress, tasks, state))
        try:
            encoded = encode_animation(
                scene,
                config,
                output_path,
                fps=fps,
                encoder_options=options,
                provider=provider,
                rasterizer=CairoSvgRasterizer(),
                tracker=tracker,
                speed_mapper=mapper,
            )
        finally:
            unsubscribe()

    console.print(f"[bold blue]Saving to {output_path}...[/bold blue]")
    try:
        provider.write(encoded)
    except OSError as e:
        raise CLIError(f"Failed to save file '{output_path}': {e}")
    console.print(f"[green]✓[/green] {ext} saved to {output_path}")


def _resolve_provider(output_path: str) -> OutputProvider[Any]:
    try:
        return resolve_output_provider(output_path)
    except ValueError as exc:
        raise CLIError(str(exc))


def _show_progress(progress: Progress, tasks: dict[str, TaskID], state: ProgressState) -> None:
    for step in state.steps:
        task_id = tasks.get(step.id)
        if task_id is None:
            continue
        description = step.name
        if step.status is StepStatus.ERROR:
            description = f"[red]{step.name}[/red]"
        elif step.status is StepStatus.COMPLETED:
            description = f"[green]{step.name}[/green]"
        progress.update(task_id, completed=step.progress, description=description)


app = typer.Typer()
app.command()(main)

if __name__ == "__main__":
    app()

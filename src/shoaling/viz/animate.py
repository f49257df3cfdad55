"""Video export of the wave packet loop with ffmpeg streaming."""

import asyncio
import logging
import subprocess
import sys
from io import BytesIO
from pathlib import Path

import matplotlib
import matplotlib.pyplot as plt

from shoaling.core.config import get_settings
from shoaling.core.types import SimulationInputs
from shoaling.simulation.animation import AnimationController, ManualClock
from shoaling.viz.render import MatplotlibSurface, create_figure

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

# Use non-interactive backend for off-screen rendering
matplotlib.use("Agg")


def render_frame_to_pipe(fig, pipe, dpi: int = 100):
    """Render matplotlib figure directly to ffmpeg pipe."""
    buf = BytesIO()
    fig.savefig(buf, format="raw", dpi=dpi)
    buf.seek(0)
    pipe.write(buf.getvalue())
    buf.close()


def animate_shoaling(
    output_path: Path,
    inputs: SimulationInputs,
    cycles: int = 2,
    fps: int = 30,
    recommended_height: float | None = None,
    scale: float = 2.0,
    dpi: int = 100,
    log_fn=None,
) -> Path:
    """Create a video of the wave packet loop.

    Frames are produced by the same animation controller used on screen,
    driven by a virtual clock one frame at a time, and streamed straight to
    ffmpeg with no intermediate files.

    Args:
        output_path: Output video file.
        inputs: Simulation inputs.
        cycles: Number of complete wave packets to record.
        fps: Video frame rate.
        recommended_height: Seawall height in meters, if assessed.
        scale: Output pixels per canvas unit.
        dpi: Figure resolution.
        log_fn: Progress logger.

    Returns:
        Path of the written video.
    """
    return asyncio.run(
        _animate(output_path, inputs, cycles, fps, recommended_height, scale, dpi, log_fn or logger.info)
    )


async def _animate(
    output_path: Path,
    inputs: SimulationInputs,
    cycles: int,
    fps: int,
    recommended_height: float | None,
    scale: float,
    dpi: int,
    log,
) -> Path:
    settings = get_settings()
    canvas = settings.canvas
    animation = settings.animation.model_copy(update={"frame_interval_s": 1.0 / fps})

    n_frames = int(round(cycles * animation.packet_duration_s * fps))

    fig, ax = create_figure(canvas, dpi=dpi, scale=scale)
    width, height = fig.canvas.get_width_height()

    clock = ManualClock()
    controller = AnimationController(
        MatplotlibSurface(ax),
        canvas=canvas,
        settings=animation,
        clock=clock,
        log_fn=log,
    )

    ffmpeg_cmd = [
        "ffmpeg",
        "-y",
        "-f", "rawvideo",
        "-vcodec", "rawvideo",
        "-s", f"{width}x{height}",
        "-pix_fmt", "rgba",
        "-r", str(fps),
        "-i", "-",
        "-c:v", "libx264",
        "-preset", "fast",
        "-crf", "23",
        "-pix_fmt", "yuv420p",
        str(output_path),
    ]

    log(f"Video: {n_frames} frames at {fps}fps ({cycles} packets)")
    try:
        pipe = subprocess.Popen(
            ffmpeg_cmd,
            stdin=subprocess.PIPE,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except FileNotFoundError:
        plt.close(fig)
        logger.error("ffmpeg not found on PATH")
        raise

    try:
        await controller.start(inputs, recommended_height)
        await clock.advance(0)
        for frame_idx in range(n_frames):
            render_frame_to_pipe(fig, pipe.stdin, dpi=dpi)
            await clock.advance(animation.frame_interval_s)

            if (frame_idx + 1) % fps == 0 or frame_idx == n_frames - 1:
                pct = 100 * (frame_idx + 1) / n_frames
                log(f"  Frame {frame_idx + 1}/{n_frames} ({pct:.0f}%)")
    finally:
        await controller.stop()
        pipe.stdin.close()
        pipe.wait()
        plt.close(fig)

    log(f"Video saved to: {output_path}")
    return output_path

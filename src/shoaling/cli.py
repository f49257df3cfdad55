"""Command-line interface for the Coastal Shoaling Hazard Visualizer."""

import asyncio
import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from shoaling.core.constants import (
    DEFAULT_DEPTH_M,
    DEFAULT_INTENSITY,
    DEFAULT_SLOPE,
    DEFAULT_VISUAL_GAIN,
    MAX_DEPTH_M,
    MAX_INTENSITY,
    MAX_SLOPE,
    MAX_VISUAL_GAIN,
    MIN_DEPTH_M,
    MIN_INTENSITY,
    MIN_SLOPE,
    MIN_VISUAL_GAIN,
)
from shoaling.core.types import SimulationInputs

app = typer.Typer(
    name="shoaling",
    help="Coastal Shoaling Hazard Visualizer",
    add_completion=False,
)
history_app = typer.Typer(help="Browse and restore assessed simulations.")
app.add_typer(history_app, name="history")
console = Console()

SlopeOption = Annotated[
    int, typer.Option(min=MIN_SLOPE, max=MAX_SLOPE, help="Seabed slope, 1 (gentle) to 10 (steep)")
]
IntensityOption = Annotated[
    int, typer.Option(min=MIN_INTENSITY, max=MAX_INTENSITY, help="Tsunami intensity, 1 to 10")
]
DepthOption = Annotated[
    float, typer.Option(min=MIN_DEPTH_M, max=MAX_DEPTH_M, help="Offshore depth (m)")
]
GainOption = Annotated[
    float, typer.Option(min=MIN_VISUAL_GAIN, max=MAX_VISUAL_GAIN, help="Visual height multiplier")
]
SeawallOption = Annotated[
    Optional[float], typer.Option("--seawall", help="Recommended seawall height (m)")
]


@app.command()
def profile(
    slope: SlopeOption = DEFAULT_SLOPE,
    intensity: IntensityOption = DEFAULT_INTENSITY,
    depth: DepthOption = DEFAULT_DEPTH_M,
    gain: GainOption = DEFAULT_VISUAL_GAIN,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
):
    """Show the seabed profile and propagation schedule."""
    from shoaling.models.shoaling import ShoalingModel, steep_factor

    inputs = SimulationInputs(slope=slope, intensity=intensity, depth=depth, visual_gain=gain)
    model = ShoalingModel.create(inputs)
    bed = model.profile
    sched = model.schedule

    summary = {
        "run": bed.run,
        "shelf_knee_x": bed.shelf_knee_x,
        "shore_x": bed.shore_x,
        "tension": bed.tension,
        "deep_depth_y": bed.deep_depth_y,
        "shore_depth_y": bed.shore_depth_y,
        "speed_deep": sched.speed_deep,
        "speed_slope": sched.speed_slope,
        "time_deep": sched.time_deep,
        "time_slope": sched.time_slope,
        "total_time_units": sched.total_time_units,
        "wave_amp": model.wave_amp,
        "steep_factor": steep_factor(slope),
        "peak_height": model.peak_height,
    }

    if json_output:
        console.print(json.dumps(summary, indent=2))
        return

    console.print(Panel.fit(
        f"[bold]Seabed Profile[/bold]\n"
        f"Slope {slope} ({inputs.slope_label}) | Intensity {intensity} | Depth {depth:g} m"
    ))

    table = Table(title="Geometry")
    table.add_column("Property")
    table.add_column("Value")
    table.add_row("Run", f"{bed.run:.1f}")
    table.add_row("Shelf knee x", f"{bed.shelf_knee_x:.1f}")
    table.add_row("Shore x", f"{bed.shore_x:.1f}")
    table.add_row("Tension", f"{bed.tension:.3f}")
    table.add_row("Deep floor y", f"{bed.deep_depth_y:.1f}")
    console.print(table)

    table = Table(title="Propagation")
    table.add_column("Property")
    table.add_column("Value")
    table.add_row("Deep-water speed", f"{sched.speed_deep:.3f}")
    table.add_row("Slope speed", f"{sched.speed_slope:.3f}")
    table.add_row("Time in deep water", f"{sched.time_deep:.1f}")
    table.add_row("Time on slope", f"{sched.time_slope:.1f}")
    table.add_row("Reaches knee at t", f"{sched.knee_progress:.3f}")
    console.print(table)

    table = Table(title="Shoaling")
    table.add_column("Property")
    table.add_column("Value")
    table.add_row("Deep-water amplitude", f"{model.wave_amp:.1f}")
    table.add_row("Steep-slope reduction", f"{steep_factor(slope):.0%}")
    table.add_row("Height at shore", f"{model.peak_height:.1f}")
    console.print(table)


@app.command()
def sample(
    slope: SlopeOption = DEFAULT_SLOPE,
    intensity: IntensityOption = DEFAULT_INTENSITY,
    depth: DepthOption = DEFAULT_DEPTH_M,
    gain: GainOption = DEFAULT_VISUAL_GAIN,
    steps: Annotated[int, typer.Option(min=2, help="Number of progress samples")] = 11,
    plot: Annotated[bool, typer.Option(help="Show wave run plot")] = False,
    output: Annotated[Optional[Path], typer.Option(help="Output plot file")] = None,
):
    """Sample packet position and height over one run to shore."""
    from shoaling.models.shoaling import ShoalingModel

    inputs = SimulationInputs(slope=slope, intensity=intensity, depth=depth, visual_gain=gain)
    model = ShoalingModel.create(inputs)
    series = model.sample_series(steps)

    table = Table(title=f"Wave run (slope {slope}, intensity {intensity}, depth {depth:g} m)")
    for column in ("t", "x", "Seabed y", "Depth ratio", "Shoaling", "Height"):
        table.add_column(column, justify="right")
    for i in range(steps):
        table.add_row(
            f"{series['t'][i]:.2f}",
            f"{series['x'][i]:.1f}",
            f"{series['seabed_y'][i]:.1f}",
            f"{series['depth_ratio'][i]:.3f}",
            f"{series['shoaling_factor'][i]:.3f}",
            f"{series['height'][i]:.2f}",
        )
    console.print(table)

    if plot or output:
        import matplotlib.pyplot as plt

        from shoaling.viz.render import plot_wave_run

        plot_wave_run(model, save_path=output)
        if output is None:
            plt.show()
        else:
            console.print(f"[green]Plot saved to {output}[/green]")


@app.command()
def render(
    output: Annotated[Path, typer.Argument(help="Output image file")] = Path("shoaling.png"),
    slope: SlopeOption = DEFAULT_SLOPE,
    intensity: IntensityOption = DEFAULT_INTENSITY,
    depth: DepthOption = DEFAULT_DEPTH_M,
    gain: GainOption = DEFAULT_VISUAL_GAIN,
    progress: Annotated[
        float, typer.Option(min=0.0, max=1.0, help="Packet progress from deep water (0) to shore (1)")
    ] = 0.8,
    elapsed: Annotated[float, typer.Option(help="Sea surface time (s)")] = 0.0,
    seawall: SeawallOption = None,
):
    """Render a still frame of the simulation."""
    import matplotlib

    matplotlib.use("Agg")
    from shoaling.viz.render import render_frame

    inputs = SimulationInputs(slope=slope, intensity=intensity, depth=depth, visual_gain=gain)
    render_frame(
        inputs,
        elapsed_s=elapsed,
        progress=progress,
        recommended_height=seawall,
        save_path=output,
    )
    console.print(f"[green]Frame saved to {output}[/green]")


@app.command()
def animate(
    output: Annotated[Path, typer.Argument(help="Output video file (e.g. wave.mp4)")] = Path("shoaling.mp4"),
    slope: SlopeOption = DEFAULT_SLOPE,
    intensity: IntensityOption = DEFAULT_INTENSITY,
    depth: DepthOption = DEFAULT_DEPTH_M,
    gain: GainOption = DEFAULT_VISUAL_GAIN,
    cycles: Annotated[int, typer.Option(min=1, help="Number of wave packets")] = 2,
    fps: Annotated[int, typer.Option(min=1, help="Video frame rate")] = 30,
    seawall: SeawallOption = None,
    play: Annotated[bool, typer.Option(help="Open video after creation")] = False,
):
    """Create a video of the wave packet loop."""
    from shoaling.viz.animate import animate_shoaling

    inputs = SimulationInputs(slope=slope, intensity=intensity, depth=depth, visual_gain=gain)

    console.print("[bold]Creating shoaling animation...[/bold]")
    console.print(f"  Slope {slope} | Intensity {intensity} | Depth {depth:g} m")
    console.print(f"  Output: {output}")

    animate_shoaling(output, inputs, cycles=cycles, fps=fps, recommended_height=seawall)

    console.print(f"[green]Video created: {output}[/green]")

    if play:
        import subprocess
        import sys
        if sys.platform == "darwin":
            subprocess.run(["open", str(output)])
        elif sys.platform == "linux":
            subprocess.run(["xdg-open", str(output)])
        elif sys.platform == "win32":
            subprocess.run(["start", str(output)], shell=True)


@app.command()
def show(
    slope: SlopeOption = DEFAULT_SLOPE,
    intensity: IntensityOption = DEFAULT_INTENSITY,
    depth: DepthOption = DEFAULT_DEPTH_M,
    gain: GainOption = DEFAULT_VISUAL_GAIN,
    seawall: SeawallOption = None,
):
    """Open the live simulation window with parameter sliders."""
    from shoaling.viz.interactive import show_interactive

    inputs = SimulationInputs(slope=slope, intensity=intensity, depth=depth, visual_gain=gain)
    show_interactive(inputs, recommended_height=seawall)


@app.command()
def assess(
    slope: SlopeOption = DEFAULT_SLOPE,
    intensity: IntensityOption = DEFAULT_INTENSITY,
    depth: DepthOption = DEFAULT_DEPTH_M,
    location: Annotated[Optional[str], typer.Option(help="Location name for context")] = None,
    save: Annotated[bool, typer.Option(help="Add the result to history")] = True,
    output: Annotated[Optional[Path], typer.Option(help="Render a frame with the seawall")] = None,
):
    """Request a hazard assessment and recommended seawall height."""
    from shoaling.data.assessment import HazardAssessmentClient
    from shoaling.simulation.history import SimulationHistory

    inputs = SimulationInputs(slope=slope, intensity=intensity, depth=depth)

    async def _run():
        async with HazardAssessmentClient() as client:
            return await asyncio.gather(
                client.analyze_simulation(slope, intensity, depth, location),
                client.find_reference_locations(slope),
            )

    console.print("[bold]Requesting hazard assessment...[/bold]")
    result, locations = asyncio.run(_run())

    console.print(Panel(Markdown(result.markdown), title="Hazard Assessment"))

    table = Table(title="Figures")
    table.add_column("Metric")
    table.add_column("Value")
    table.add_row("Estimated wave height", f"{result.estimated_wave_height:g} m")
    table.add_row("Recommended seawall", f"{result.recommended_seawall_height:g} m")
    console.print(table)

    if locations:
        table = Table(title="Reference Locations")
        table.add_column("Location")
        table.add_column("Link")
        for loc in locations:
            table.add_row(loc.title, loc.uri)
        console.print(table)

    if save and result.has_recommendation:
        record = SimulationHistory.open().add(inputs, result, location)
        console.print(f"[green]Saved to history as {record.id}[/green]")

    if output:
        import matplotlib

        matplotlib.use("Agg")
        from shoaling.viz.render import render_frame

        render_frame(
            inputs,
            recommended_height=result.recommended_seawall_height or None,
            save_path=output,
        )
        console.print(f"[green]Frame saved to {output}[/green]")


@app.command()
def locate(
    lat: Annotated[float, typer.Argument(min=-90.0, max=90.0, help="Latitude")],
    lng: Annotated[float, typer.Argument(min=-180.0, max=180.0, help="Longitude")],
    intensity: IntensityOption = DEFAULT_INTENSITY,
):
    """Look up depth and slope for a coordinate and derive simulation inputs."""
    from shoaling.data.assessment import HazardAssessmentClient

    async def _run():
        async with HazardAssessmentClient() as client:
            return await client.analyze_coordinates(lat, lng)

    location = asyncio.run(_run())
    if location is None:
        console.print("[red]Could not analyse this coordinate.[/red]")
        raise typer.Exit(code=1)

    if location.is_land:
        console.print(f"[yellow]{location.name} is on land; pick a point at sea.[/yellow]")
        raise typer.Exit(code=1)

    inputs = SimulationInputs.from_location(location, intensity=intensity)

    table = Table(title=location.name)
    table.add_column("Property")
    table.add_column("Value")
    table.add_row("Coordinates", f"{location.lat:.4f}, {location.lng:.4f}")
    table.add_row("Depth", f"{location.depth_meters:.1f} m")
    table.add_row("Slope score", f"{location.slope_score:g}")
    table.add_row("Simulation slope", str(inputs.slope))
    table.add_row("Simulation depth", f"{inputs.depth:g} m")
    console.print(table)


@history_app.command("list")
def history_list():
    """List assessed simulations, newest first."""
    from shoaling.simulation.history import SimulationHistory

    history = SimulationHistory.open()
    if not history.records:
        console.print("No simulations recorded.")
        return

    table = Table(title="Simulation History")
    table.add_column("ID")
    table.add_column("Time")
    table.add_column("Location")
    table.add_column("Slope", justify="right")
    table.add_column("Intensity", justify="right")
    table.add_column("Depth", justify="right")
    table.add_column("Wave / Seawall", justify="right")
    for record in history.records:
        table.add_row(
            record.id,
            record.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            record.location_name,
            str(record.params.slope),
            str(record.params.intensity),
            f"{record.params.depth:g} m",
            f"{record.result.wave_height or '-'}m / {record.result.recommended_height}m",
        )
    console.print(table)


@history_app.command("clear")
def history_clear():
    """Delete all recorded simulations."""
    from shoaling.simulation.history import SimulationHistory

    SimulationHistory.open().clear()
    console.print("[green]History cleared.[/green]")


@history_app.command("restore")
def history_restore(
    record_id: Annotated[str, typer.Argument(help="Record ID")],
    show_window: Annotated[bool, typer.Option("--show", help="Open the live window")] = False,
):
    """Print (and optionally show) the inputs of a recorded simulation."""
    from shoaling.simulation.history import SimulationHistory

    history = SimulationHistory.open()
    try:
        record = history.get(record_id)
    except KeyError:
        console.print(f"[red]No record {record_id}[/red]")
        raise typer.Exit(code=1)

    inputs = record.to_inputs()
    console.print(
        f"slope={inputs.slope} intensity={inputs.intensity} depth={inputs.depth:g}m "
        f"seawall={record.result.recommended_height:g}m"
    )

    if show_window:
        from shoaling.viz.interactive import show_interactive

        show_interactive(inputs, recommended_height=record.result.recommended_height or None)


@app.command()
def version():
    """Show version information."""
    from shoaling import __version__
    console.print(f"shoaling v{__version__}")


if __name__ == "__main__":
    app()

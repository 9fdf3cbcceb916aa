"""CLI entry point for the storyboard generator."""

import asyncio
import logging
import typer
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import config
from .export import export_assets, save_generation_summary
from .models import Scene, Slot, Storyboard
from .orchestrator import GenerationOrchestrator
from .services import GenerationService, VertexGenerationService
from .store import SceneStore

app = typer.Typer(
    name="storyboarder",
    help="AI storyboard frame and voice generator for product videos",
    no_args_is_help=True
)

SCRIPT_OPTION = typer.Option(
    Path("storyboard.yaml"),
    "--script",
    "-s",
    help="Path to storyboard YAML file",
    exists=True,
    file_okay=True,
    dir_okay=False
)
ASSETS_DIR = "assets"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"storyboarder version {__version__}")
        raise typer.Exit()


def build_service() -> GenerationService:
    """Create the generation backend used by the commands."""
    config.validate_vertex_required()
    return VertexGenerationService()


def _load(script: Path) -> Storyboard:
    try:
        return Storyboard.from_yaml(script)
    except Exception as e:
        typer.echo(f"❌ Error loading storyboard: {e}")
        raise typer.Exit(1)


def _orchestrator(storyboard: Storyboard, script: Path) -> GenerationOrchestrator:
    try:
        references = storyboard.load_references(script.parent)
        service = build_service()
    except (ValueError, FileNotFoundError) as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    return GenerationOrchestrator(
        SceneStore(storyboard.scenes),
        service,
        settings=storyboard.settings,
        references=references,
        voice=storyboard.assigned_voice,
    )


def _resolve_scene(storyboard: Storyboard, scene_id: str) -> Scene:
    for scene in storyboard.scenes:
        if scene.id == scene_id:
            return scene
    typer.echo(f"❌ Unknown scene: {scene_id}")
    typer.echo(f"   Scenes: {', '.join(s.id for s in storyboard.scenes)}")
    raise typer.Exit(1)


def _save(storyboard: Storyboard, orchestrator: GenerationOrchestrator, script: Path) -> None:
    """Write assets next to the storyboard, save it, and report failures."""
    scenes = list(orchestrator.store.scenes)
    storyboard.scenes = scenes

    asset_dir = script.parent / ASSETS_DIR
    written = export_assets(scenes, asset_dir)
    storyboard.to_yaml(script, asset_paths=written)
    save_generation_summary(scenes, asset_dir / "generation_summary.json")
    typer.echo(f"💾 Saved {script} ({len(written)} assets in {asset_dir})")

    failed = [scene for scene in scenes if scene.error]
    for scene in failed:
        typer.echo(f"   ❌ {scene.id}: {scene.error}")
    if failed:
        raise typer.Exit(1)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Storyboarder - Generate storyboard frames and voice lines with AI."""
    setup_logging(verbose)


@app.command()
def status(script: Path = SCRIPT_OPTION) -> None:
    """Show storyboard status."""
    storyboard = _load(script)
    mode = storyboard.settings.video_mode

    typer.echo(f"📁 Project: {storyboard.project_name}")
    typer.echo(f"   Mode: {mode.value}")
    typer.echo(f"   Aspect ratio: {storyboard.settings.aspect_ratio.value}")
    typer.echo(f"   Resolution: {storyboard.settings.resolution.value}")
    typer.echo(f"   Voice: {storyboard.assigned_voice}")
    typer.echo(f"   Scenes: {len(storyboard.scenes)}")

    typer.echo("\n🎞️  Scenes:")
    for scene in storyboard.scenes:
        frames = " ".join(
            f"{slot.value}:{'✅' if scene.asset(slot) else '⏳'}" for slot in mode.slots
        )
        audio = "🔊" if scene.audio else ("🔇" if scene.dialogue else "-")
        typer.echo(f"   {scene.id}: {frames} audio:{audio}")
        if scene.prompt:
            preview = scene.prompt[:60] + "..." if len(scene.prompt) > 60 else scene.prompt
            typer.echo(f"      → {' '.join(preview.split())}")


@app.command()
def generate(
    scene_id: str = typer.Argument(..., help="Scene to generate a frame for"),
    slot: Slot = typer.Option(Slot.START, "--slot", help="Frame slot"),
    prompt: Optional[str] = typer.Option(
        None,
        "--prompt",
        "-p",
        help="Prompt to use instead of the scene's stored prompt"
    ),
    script: Path = SCRIPT_OPTION,
) -> None:
    """Generate (or regenerate) one frame of a scene."""
    storyboard = _load(script)
    _resolve_scene(storyboard, scene_id)
    if slot not in storyboard.settings.video_mode.slots:
        typer.echo(f"❌ Slot '{slot.value}' is not used in {storyboard.settings.video_mode.value} mode")
        raise typer.Exit(1)

    orchestrator = _orchestrator(storyboard, script)
    typer.echo(f"🎨 Generating {slot.value} frame for {scene_id}")
    asyncio.run(orchestrator.generate(scene_id, slot, prompt_override=prompt))
    _save(storyboard, orchestrator, script)


@app.command()
def batch(
    scene_ids: Optional[List[str]] = typer.Argument(
        None,
        help="Scenes to fill (all scenes if omitted)"
    ),
    script: Path = SCRIPT_OPTION,
) -> None:
    """Generate every missing frame, scene by scene in storyboard order.

    Scenes run one after another so end frames can chain into the
    following scene's start frame.
    """
    storyboard = _load(script)
    targets = scene_ids or [scene.id for scene in storyboard.scenes]
    for scene_id in targets:
        _resolve_scene(storyboard, scene_id)

    orchestrator = _orchestrator(storyboard, script)

    async def run_all() -> None:
        for scene_id in targets:
            typer.echo(f"🎬 {scene_id}")
            results = await orchestrator.generate_all(scene_id)
            for slot, asset in results.items():
                typer.echo(f"   {'✅' if asset else '❌'} {slot.value}")

    asyncio.run(run_all())
    _save(storyboard, orchestrator, script)


@app.command()
def refine(
    scene_id: str = typer.Argument(..., help="Scene to refine"),
    slot: Slot = typer.Argument(..., help="Frame slot to refine"),
    instruction: str = typer.Argument(..., help="What to change in the current frame"),
    script: Path = SCRIPT_OPTION,
) -> None:
    """Modify an existing frame with a free-text instruction."""
    storyboard = _load(script)
    scene = _resolve_scene(storyboard, scene_id)
    if scene.asset(slot) is None:
        typer.echo(f"❌ {scene_id} has no {slot.value} frame to refine")
        raise typer.Exit(1)
    if not instruction.strip():
        typer.echo("❌ Instruction cannot be empty")
        raise typer.Exit(1)

    orchestrator = _orchestrator(storyboard, script)
    typer.echo(f"🪄 Refining {slot.value} frame of {scene_id}: {instruction}")
    asyncio.run(orchestrator.refine(scene_id, slot, instruction))
    _save(storyboard, orchestrator, script)


@app.command()
def audio(
    scene_ids: Optional[List[str]] = typer.Argument(
        None,
        help="Scenes to voice (all scenes if omitted)"
    ),
    script: Path = SCRIPT_OPTION,
) -> None:
    """Synthesize dialogue audio with the storyboard's assigned voice."""
    storyboard = _load(script)
    targets = scene_ids or [scene.id for scene in storyboard.scenes]
    for scene_id in targets:
        _resolve_scene(storyboard, scene_id)

    orchestrator = _orchestrator(storyboard, script)
    typer.echo(f"🎙️  Voicing {len(targets)} scene(s) with {storyboard.assigned_voice}")

    async def run_all() -> None:
        await asyncio.gather(*(orchestrator.synthesize_audio(s) for s in targets))

    asyncio.run(run_all())
    _save(storyboard, orchestrator, script)


@app.command("revise-prompt")
def revise_prompt(
    scene_id: str = typer.Argument(..., help="Scene whose prompt to rebuild"),
    script: Path = SCRIPT_OPTION,
) -> None:
    """Rebuild a scene's generation prompt from its edited narrative."""
    storyboard = _load(script)
    _resolve_scene(storyboard, scene_id)

    orchestrator = _orchestrator(storyboard, script)
    typer.echo(f"✏️  Revising prompt for {scene_id}")
    prompt = asyncio.run(orchestrator.revise_prompt(scene_id))
    if prompt:
        typer.echo(prompt)
    _save(storyboard, orchestrator, script)


@app.command()
def export(
    output: Path = typer.Option(
        Path("./export"),
        "--output",
        "-o",
        help="Directory to write frames and audio to"
    ),
    script: Path = SCRIPT_OPTION,
) -> None:
    """Export all frames and audio with per-scene file names."""
    storyboard = _load(script)
    written = export_assets(storyboard.scenes, output)
    if not written:
        typer.echo("⚠️  No assets to export")
        raise typer.Exit(0)

    for path in sorted(written.values()):
        typer.echo(f"   {path}")
    typer.echo(f"✅ Exported {len(written)} assets to {output}")


if __name__ == "__main__":
    app()

import pytest
import yaml
from typer.testing import CliRunner

from storyboarder import cli

from fakes import FakeService

runner = CliRunner()

STORYBOARD = {
    "project_name": "Bottle",
    "settings": {"video_mode": "start_end"},
    "assigned_voice": "Puck",
    "scenes": [
        {"id": "one", "prompt": "first", "dialogue": "Hello"},
        {"id": "two", "prompt": "second", "dialogue": ""},
    ],
}


@pytest.fixture
def service(monkeypatch):
    fake = FakeService()
    monkeypatch.setattr(cli, "build_service", lambda: fake)
    return fake


@pytest.fixture
def script(tmp_path):
    path = tmp_path / "storyboard.yaml"
    path.write_text(yaml.safe_dump(STORYBOARD), encoding="utf-8")
    return path


def test_batch_fills_and_chains_frames(service, script):
    result = runner.invoke(cli.app, ["batch", "--script", str(script)])

    assert result.exit_code == 0, result.output
    data = yaml.safe_load(script.read_text(encoding="utf-8"))
    one, two = data["scenes"]
    assert one["start_image"] == "assets/scene_1_start.jpg"
    assert two["end_image"] == "assets/scene_2_end.jpg"

    assets = script.parent / "assets"
    assert (assets / "scene_2_start.jpg").read_bytes() == (assets / "scene_1_end.jpg").read_bytes()
    assert (assets / "generation_summary.json").exists()
    assert len(service.image_calls) == 3


def test_failures_exit_nonzero_but_save(service, script):
    service.failures[0] = RuntimeError("quota")

    result = runner.invoke(cli.app, ["generate", "one", "--script", str(script)])

    assert result.exit_code == 1
    assert "Generation failed: quota" in result.output


def test_audio_skips_scenes_without_dialogue(service, script):
    result = runner.invoke(cli.app, ["audio", "--script", str(script)])

    assert result.exit_code == 0, result.output
    assert service.speech_calls == [("Hello", "Puck")]
    data = yaml.safe_load(script.read_text(encoding="utf-8"))
    assert data["scenes"][0]["audio"] == "assets/scene_1_audio.wav"
    assert "audio" not in data["scenes"][1]


def test_refine_requires_existing_frame(service, script):
    result = runner.invoke(cli.app, ["refine", "one", "end", "warmer", "--script", str(script)])

    assert result.exit_code == 1
    assert service.image_calls == []


def test_generate_rejects_slot_outside_mode(service, script):
    result = runner.invoke(cli.app, ["generate", "one", "--slot", "middle", "--script", str(script)])
    assert result.exit_code == 1


def test_status_and_unknown_scene(service, script):
    result = runner.invoke(cli.app, ["status", "--script", str(script)])
    assert result.exit_code == 0
    assert "Project: Bottle" in result.output

    result = runner.invoke(cli.app, ["revise-prompt", "nope", "--script", str(script)])
    assert result.exit_code == 1
    assert "Unknown scene: nope" in result.output

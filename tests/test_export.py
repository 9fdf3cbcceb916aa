import json

from storyboarder.export import asset_filename, export_assets, save_generation_summary
from storyboarder.models import Asset, Scene, Slot


def test_filenames_follow_scene_number_and_slot():
    jpeg = Asset.image(b"x")
    assert asset_filename(0, Slot.START, jpeg) == "scene_1_start.jpg"
    assert asset_filename(1, Slot.MIDDLE, Asset.image(b"x", "image/png")) == "scene_2_mid.png"
    assert asset_filename(2, Slot.END, jpeg) == "scene_3_end.jpg"
    assert asset_filename(0, "audio", Asset.audio(b"RIFF")) == "scene_1_audio.wav"


def test_export_and_summary(tmp_path):
    scenes = [
        Scene(id="a", start_image=Asset.image(b"s"), end_image=Asset.image(b"e"), audio=Asset.audio(b"w")),
        Scene(id="b", start_image=Asset.image(b"e"), error="Generation failed: quota"),
        Scene(id="c"),
    ]

    written = export_assets(scenes, tmp_path / "out")

    assert set(written) == {("a", "start"), ("a", "end"), ("a", "audio"), ("b", "start")}
    assert written[("a", "audio")].read_bytes() == b"w"
    assert written[("b", "start")].name == "scene_2_start.jpg"

    summary_path = tmp_path / "out" / "summary.json"
    save_generation_summary(scenes, summary_path)
    summary = json.loads(summary_path.read_text(encoding="utf-8"))

    assert summary["total_scenes"] == 3
    assert summary["frames"] == {"start": 2, "middle": 0, "end": 1}
    assert summary["audio"] == 1
    assert summary["failed"] == 1
    assert summary["scenes"][1] == {
        "id": "b",
        "frames": ["start"],
        "audio": False,
        "error": "Generation failed: quota",
    }

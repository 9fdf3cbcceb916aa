import logging

import pytest

from storyboarder.errors import SceneNotFoundError
from storyboarder.models import Scene
from storyboarder.store import SceneStore

from fakes import image


def _store():
    return SceneStore([Scene(id="a"), Scene(id="b"), Scene(id="c")])


def test_patch_replaces_scene_and_keeps_old_snapshot():
    store = _store()
    before = store.get("a")
    after = store.patch("a", prompt="new", start_image=image("x"))

    assert before.prompt == ""
    assert before.start_image is None
    assert store.get("a") is after
    assert after.prompt == "new"
    assert after.start_image == image("x")


def test_patch_rejects_unknown_fields_and_ids():
    store = _store()
    with pytest.raises(ValueError):
        store.patch("a", colour="red")
    with pytest.raises(ValueError):
        store.patch("a", id="z")
    with pytest.raises(SceneNotFoundError):
        store.patch("zzz", prompt="x")


def test_sequence_helpers():
    store = _store()
    assert [s.id for s in store.scenes] == ["a", "b", "c"]
    assert store.index_of("b") == 1
    assert store.next_after("a").id == "b"
    assert store.next_after("c") is None
    assert len(store) == 3


def test_patching_one_scene_leaves_others_alone():
    store = _store()
    store.patch("b", generating_start=True)
    assert not store.get("a").generating_start
    assert not store.get("c").generating_start


def test_subscribers_see_every_patch():
    store = _store()
    seen = []
    unsubscribe = store.subscribe(lambda scene: seen.append((scene.id, scene.error)))

    store.patch("a", error="boom")
    store.patch("b", error=None)
    unsubscribe()
    store.patch("c", error="ignored")

    assert seen == [("a", "boom"), ("b", None)]


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError):
        SceneStore([Scene(id="a"), Scene(id="a")])


def test_listener_errors_are_logged_not_raised(caplog):
    store = _store()
    seen = []

    def broken(scene):
        raise RuntimeError("render crashed")

    store.subscribe(broken)
    store.subscribe(lambda scene: seen.append(scene.id))

    with caplog.at_level(logging.ERROR):
        patched = store.patch("a", prompt="new")

    assert store.get("a") is patched
    assert seen == ["a"]
    assert "render crashed" in caplog.text

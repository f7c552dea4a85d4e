from storyboard.data_models import Character, MediaKind, Scene, TaskResult
from storyboard.storyboard_state import StoryboardState


def _state():
    return StoryboardState(
        characters=[
            Character(id="char-a", name="Akira", description="", visual_prompt="red scarf"),
            Character(id="char-b", name="Mei", description="", visual_prompt="silver coat"),
        ],
        scenes=[
            Scene(id="scene-1", number=1, description="", visual_prompt="bridge"),
            Scene(id="scene-2", number=2, description="", visual_prompt="rooftop"),
        ],
    )


class TestApply:

    def test_success_sets_media_and_clears_flag(self):
        state = _state()
        state.mark_loading(MediaKind.SCENE_VIDEO, ["scene-1"])
        assert state.scene("scene-1").is_video_loading
        state.apply(TaskResult(entity_id="scene-1", kind=MediaKind.SCENE_VIDEO, media_uri="data:video/mp4;base64,AA=="))
        s1 = state.scene("scene-1")
        assert s1.video_url == "data:video/mp4;base64,AA=="
        assert not s1.is_video_loading
        assert s1.image_url is None

    def test_failure_only_clears_flag(self):
        state = _state()
        state.mark_loading(MediaKind.CHARACTER_IMAGE, ["char-a", "char-b"])
        state.apply(TaskResult(entity_id="char-b", kind=MediaKind.CHARACTER_IMAGE, error="blocked"))
        assert state.character("char-b").image_url is None
        assert not state.character("char-b").is_loading
        assert state.character("char-a").is_loading
        assert state.errors["character_image:char-b"] == "blocked"

    def test_later_success_clears_error(self):
        state = _state()
        state.apply(TaskResult(entity_id="scene-2", kind=MediaKind.SCENE_AUDIO, error="quota"))
        state.apply(TaskResult(entity_id="scene-2", kind=MediaKind.SCENE_AUDIO, media_uri="data:audio/wav;base64,AA=="))
        assert "scene_audio:scene-2" not in state.errors
        assert state.scene("scene-2").audio_url.startswith("data:audio/wav")

    def test_unknown_id_is_ignored(self):
        state = _state()
        assert not state.apply(TaskResult(entity_id="scene-9", kind=MediaKind.SCENE_IMAGE, media_uri="x"))

    def test_apply_all_counts_merged(self):
        state = _state()
        merged = state.apply_all([
            TaskResult(entity_id="scene-1", kind=MediaKind.SCENE_IMAGE, media_uri="a"),
            TaskResult(entity_id="scene-2", kind=MediaKind.SCENE_IMAGE, error="x"),
            TaskResult(entity_id="gone", kind=MediaKind.SCENE_IMAGE, media_uri="b"),
        ])
        assert merged == 2
        assert [s.image_url for s in state.scenes] == ["a", None]


class TestEdits:

    def test_update_character_is_partial(self):
        state = _state()
        assert state.update_character("char-a", visual_prompt="blue scarf")
        a = state.character("char-a")
        assert a.visual_prompt == "blue scarf"
        assert a.name == "Akira"

    def test_update_scene_replaces_entity(self):
        state = _state()
        before = state.scene("scene-1")
        state.update_scene("scene-1", camera="crane shot")
        assert state.scene("scene-1") is not before
        assert before.camera == ""

"""Tests for the playback controller."""

from unittest.mock import MagicMock, patch

import pytest

from scrubber.bindings import Action, Binding, BindingResolver, KeyChord, Modifier
from scrubber.controller import PlaybackController, PlaybackState
from scrubber.engine import NullEngine
from scrubber.errors import LoadFailure, SeekFailure


class TestPlaybackState:
    """Tests for PlaybackState."""

    def test_defaults(self):
        """Test initial state values."""
        state = PlaybackState()
        assert state.paused is False
        assert state.looping is False
        assert state.position == 0.0
        assert state.duration == 0.0
        assert state.dragging is False

    def test_clamp(self):
        """Test clamping into the media range."""
        state = PlaybackState(duration=100.0)
        assert state.clamp(-5.0) == 0.0
        assert state.clamp(50.0) == 50.0
        assert state.clamp(150.0) == 100.0

    def test_progress_fraction(self):
        """Test progress_fraction property."""
        assert PlaybackState(position=25.0, duration=100.0).progress_fraction == 0.25
        assert PlaybackState().progress_fraction == 0.0


class TestConstruction:
    """Tests for building a controller."""

    def test_initial_state_mirrors_engine(self, engine: NullEngine):
        """Test the state is read from the loaded engine."""
        engine.looping = True
        controller = PlaybackController(engine)
        assert controller.state.duration == 120.0
        assert controller.state.looping is True
        assert controller.state.paused is False
        assert controller.state.position == 0.0

    def test_default_resolver(self, engine: NullEngine):
        """Test the built-in bindings are used when none are given."""
        controller = PlaybackController(engine)
        assert controller.resolver.bindings == BindingResolver.default().bindings

    def test_open_with_null_backend(self):
        """Test opening a source through the backend factory."""
        with patch("scrubber.engine.base.NullEngine.load") as load:
            controller = PlaybackController.open("clip.mp4", "null", seek_step=5.0)
        load.assert_called_once_with("clip.mp4")
        assert controller.seek_step == 5.0

    def test_open_load_failure_is_fatal(self):
        """Test a load failure prevents construction."""
        with (
            patch(
                "scrubber.engine.base.NullEngine.load",
                side_effect=LoadFailure("bad.mp4", "file not found"),
            ),
            pytest.raises(LoadFailure),
        ):
            PlaybackController.open("bad.mp4", "null")


class TestTogglePause:
    """Tests for toggle_pause."""

    def test_toggle_pause(self, controller: PlaybackController, engine: NullEngine):
        """Test pausing mirrors to the engine."""
        controller.toggle_pause()
        assert controller.state.paused is True
        assert engine.paused is True

    def test_toggle_twice_restores(self, controller: PlaybackController):
        """Test two toggles restore the original value."""
        original = controller.state.paused
        controller.toggle_pause()
        controller.toggle_pause()
        assert controller.state.paused is original

    def test_toggle_follows_engine_truth(
        self, controller: PlaybackController, engine: NullEngine
    ):
        """Test toggling starts from the engine's actual paused flag."""
        engine.paused = True
        controller.toggle_pause()
        assert engine.paused is False
        assert controller.state.paused is False


class TestToggleLoop:
    """Tests for toggle_loop."""

    def test_toggle_loop(self, controller: PlaybackController, engine: NullEngine):
        """Test looping mirrors to the engine."""
        controller.toggle_loop()
        assert controller.state.looping is True
        assert engine.looping is True
        controller.toggle_loop()
        assert controller.state.looping is False
        assert engine.looping is False


class TestSeekAbsolute:
    """Tests for seek_absolute (dragging)."""

    def test_sets_drag_state(self, controller: PlaybackController, engine: NullEngine):
        """Test a drag seek updates position and dragging."""
        controller.seek_absolute(42.0)
        assert controller.state.dragging is True
        assert controller.state.position == 42.0
        assert controller.state.paused is False
        assert engine.seeks == [(42.0, False)]

    def test_forces_unpause(self, controller: PlaybackController, engine: NullEngine):
        """Test a drag seek resumes a paused engine."""
        controller.toggle_pause()
        controller.seek_absolute(10.0)
        assert engine.paused is False
        assert controller.state.paused is False

    def test_next_tick_keeps_position(
        self, controller: PlaybackController, engine: NullEngine
    ):
        """Test engine feedback cannot overwrite a dragged position."""
        controller.seek_absolute(30.0)
        engine._position = 31.7
        controller.on_engine_tick()
        assert controller.state.position == 30.0
        assert controller.state.paused is True
        assert engine.paused is True

    def test_negative_rejected(self, controller: PlaybackController, engine: NullEngine):
        """Test negative targets are rejected before any change."""
        with pytest.raises(ValueError):
            controller.seek_absolute(-1.0)
        assert controller.state.dragging is False
        assert engine.seeks == []

    def test_out_of_range_failure(self, controller: PlaybackController):
        """Test a rejected seek keeps the position and the drag."""
        controller.state.position = 12.5
        with pytest.raises(SeekFailure):
            controller.seek_absolute(200.0)
        assert controller.state.position == 12.5
        assert controller.state.dragging is True

    def test_unseekable_failure(self):
        """Test an unseekable stream surfaces SeekFailure."""
        engine = NullEngine(duration=120.0, seekable=False)
        engine.load("http://example.com/live")
        controller = PlaybackController(engine)
        with pytest.raises(SeekFailure):
            controller.seek_absolute(5.0)
        assert controller.state.position == 0.0


class TestSeekRelative:
    """Tests for seek_relative (key jumps)."""

    def test_accurate_seek_from_position(
        self, controller: PlaybackController, engine: NullEngine
    ):
        """Test relative seeks are accurate and relative to the mirror."""
        controller.state.position = 50.0
        controller.seek_relative(10.0)
        assert engine.seeks == [(60.0, True)]

    def test_does_not_touch_local_state(self, controller: PlaybackController):
        """Test relative seeks leave position, dragging and paused alone."""
        controller.toggle_pause()
        controller.state.position = 50.0
        controller.seek_relative(-10.0)
        assert controller.state.position == 50.0
        assert controller.state.dragging is False
        assert controller.state.paused is True

    def test_tick_reports_new_position(
        self, controller: PlaybackController, engine: NullEngine
    ):
        """Test the next tick picks up the post-seek position."""
        controller.state.position = 50.0
        controller.seek_relative(10.0)
        controller.on_engine_tick()
        assert controller.state.position == 60.0

    def test_clamped_to_start(self, controller: PlaybackController, engine: NullEngine):
        """Test seeking back near the start lands on zero."""
        controller.state.position = 3.0
        controller.seek_relative(-10.0)
        assert engine.seeks == [(0.0, True)]

    def test_clamped_to_end(self, controller: PlaybackController, engine: NullEngine):
        """Test seeking forward near the end lands on the duration."""
        controller.state.position = 115.0
        controller.seek_relative(10.0)
        assert engine.seeks == [(120.0, True)]

    def test_failure_propagates(self):
        """Test engine rejections reach the caller."""
        engine = NullEngine(duration=120.0, seekable=False)
        engine.load("http://example.com/live")
        controller = PlaybackController(engine)
        with pytest.raises(SeekFailure):
            controller.seek_relative(10.0)


class TestSeekRelease:
    """Tests for seek_release."""

    def test_release_after_drag(self, controller: PlaybackController, engine: NullEngine):
        """Test releasing ends the drag with an accurate seek."""
        controller.seek_absolute(5.0)
        controller.on_engine_tick()
        controller.seek_release()
        assert controller.state.dragging is False
        assert controller.state.paused is False
        assert engine.paused is False
        assert engine.seeks[-1] == (5.0, True)

    def test_release_without_drag_is_noop(
        self, controller: PlaybackController, engine: NullEngine
    ):
        """Test releasing without a drag does nothing."""
        controller.toggle_pause()
        controller.seek_release()
        assert engine.seeks == []
        assert controller.state.paused is True

    def test_rapid_drag_sequence(self, controller: PlaybackController):
        """Test drag, tick, drag, release ends on the last position."""
        controller.seek_absolute(10.0)
        controller.on_engine_tick()
        controller.seek_absolute(20.0)
        controller.seek_release()
        assert controller.state.dragging is False
        assert controller.state.position == 20.0
        assert controller.state.paused is False


class TestEngineTick:
    """Tests for on_engine_tick."""

    def test_updates_position(self, controller: PlaybackController, engine: NullEngine):
        """Test ticks refresh the position when not dragging."""
        engine.advance(3.5)
        assert controller.state.position == 0.0
        controller.on_engine_tick()
        assert controller.state.position == 3.5

    def test_mirrors_engine_flags(
        self, controller: PlaybackController, engine: NullEngine
    ):
        """Test ticks pick up paused/looping changes made by the engine."""
        engine.advance(200.0)
        controller.on_engine_tick()
        assert controller.state.paused is True
        assert controller.state.position == 120.0

    def test_position_clamped(self, controller: PlaybackController, engine: NullEngine):
        """Test reported positions are kept within the duration."""
        engine._position = 130.0
        controller.on_engine_tick()
        assert controller.state.position == 120.0


class TestEndOfStream:
    """Tests for on_end_of_stream."""

    def test_no_state_change(self, controller: PlaybackController):
        """Test end of stream leaves the state untouched."""
        controller.state.position = 120.0
        before = PlaybackState(**vars(controller.state))
        controller.on_end_of_stream()
        assert controller.state == before

    def test_listener_called(self, engine: NullEngine):
        """Test the optional listener is notified."""
        listener = MagicMock()
        controller = PlaybackController(engine, end_of_stream_listener=listener)
        controller.on_end_of_stream()
        listener.assert_called_once_with()


class TestDispatch:
    """Tests for dispatching actions and chords."""

    def test_left_arrow_seeks_back(self, controller: PlaybackController):
        """Test the default left arrow issues a -10s relative seek."""
        with patch.object(controller, "seek_relative") as seek_relative:
            action = controller.resolve_and_dispatch(KeyChord("left"))
        assert action is Action.SEEK_BACKWARD
        seek_relative.assert_called_once_with(-10.0)

    def test_right_arrow_seeks_forward(self, controller: PlaybackController):
        """Test the default right arrow issues a +10s relative seek."""
        with patch.object(controller, "seek_relative") as seek_relative:
            action = controller.resolve_and_dispatch(KeyChord("right"))
        assert action is Action.SEEK_FORWARD
        seek_relative.assert_called_once_with(10.0)

    def test_space_toggles_pause(self, controller: PlaybackController):
        """Test the default space binding toggles pause."""
        controller.resolve_and_dispatch(KeyChord("space"))
        assert controller.state.paused is True

    def test_l_toggles_loop(self, controller: PlaybackController):
        """Test the default l binding toggles looping."""
        controller.resolve_and_dispatch(KeyChord("l"))
        assert controller.state.looping is True

    def test_unbound_chord_is_noop(
        self, controller: PlaybackController, engine: NullEngine
    ):
        """Test unbound chords change nothing."""
        chord = KeyChord("left", frozenset({Modifier.CTRL}))
        assert controller.resolve_and_dispatch(chord) is None
        assert engine.seeks == []
        assert controller.state.paused is False

    def test_seek_step_used(self, engine: NullEngine):
        """Test the configured seek step drives relative actions."""
        controller = PlaybackController(engine, seek_step=30.0)
        controller.dispatch(Action.SEEK_FORWARD)
        assert engine.seeks == [(30.0, True)]

    def test_rebind_replaces_resolver(self, controller: PlaybackController):
        """Test rebinding swaps the whole mapping."""
        resolver = BindingResolver([Binding(KeyChord("p"), Action.TOGGLE_PAUSE)])
        controller.rebind(resolver, seek_step=5.0)
        assert controller.resolver is resolver
        assert controller.seek_step == 5.0
        assert controller.resolve_and_dispatch(KeyChord("space")) is None
        assert controller.resolve_and_dispatch(KeyChord("p")) is Action.TOGGLE_PAUSE

"""
Tests for the event-driven sound effects.

Actual playback is hard to observe, so these mainly check that sounds
are generated, that each game event maps to the right sound, and that
missing audio hardware is handled gracefully. SDL runs on its dummy
audio driver (see conftest.py).
"""
import random
from unittest.mock import MagicMock, Mock, patch

import pytest

pygame = pytest.importorskip("pygame")
np = pytest.importorskip("numpy")

from missile_command.gameplay.geometry import Point
from missile_command.gameplay.constants import GROUND_Y
from missile_command.gameplay.events import (
    ExplosionEvent, FiredEvent, GameOverEvent, LevelStartedEvent, StructureDestroyedEvent,
)
from missile_command.ui.audio import (
    AudioManager, AMBIENT_VOLUME, VOLUME_STEP,
    synth_ambient, synth_explosion, synth_fire, synth_game_over, synth_level_start,
)
from missile_command.ui.input_handler import InputHandler

SOUND_NAMES = ['fire', 'explosion', 'heavy_explosion', 'game_over', 'level_start', 'ambient']


@pytest.fixture
def pygame_init():
    """Initialize pygame for testing."""
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture
def quiet_audio():
    """An AudioManager with every play method replaced by a Mock."""
    audio = AudioManager(audio_enabled=False)
    audio.play_fire_sound = Mock()
    audio.play_explosion_sound = Mock()
    audio.play_game_over_sound = Mock()
    audio.play_level_start_sound = Mock()
    return audio


def mock_sounds(audio):
    """Pretend audio came up, with a MagicMock standing in for each sound."""
    audio.audio_enabled = True
    audio.sounds = {name: [MagicMock()] for name in SOUND_NAMES}
    return audio.sounds


class TestAudioManagerSetup:
    """Tests for mixer initialization and sound generation."""

    def test_audio_enabled(self, pygame_init):
        audio = AudioManager(audio_enabled=True, rng=random.Random(3))

        assert isinstance(audio.sounds, dict)
        if audio.audio_enabled:
            assert set(audio.sounds) == set(SOUND_NAMES)
            for variants in audio.sounds.values():
                for sound in variants:
                    assert isinstance(sound, pygame.mixer.Sound)

    def test_audio_disabled(self, pygame_init):
        audio = AudioManager(audio_enabled=False)
        assert audio.audio_enabled is False
        assert audio.sounds == {}

    def test_no_audio_device(self, pygame_init):
        """A mixer that cannot open disables audio instead of crashing."""
        with patch('missile_command.ui.audio.pygame.mixer.init',
                   side_effect=pygame.error("Audio device not available")):
            audio = AudioManager(audio_enabled=True)

        assert audio.audio_enabled is False
        assert audio.sounds == {}
        audio.play_fire_sound()
        audio.start_ambient()
        assert audio.ambient_channel is None

    def test_sound_generation_failure(self, pygame_init):
        """Sounds that fail to render are skipped; playing them is a no-op."""
        with patch('missile_command.ui.audio.pygame.sndarray.make_sound',
                   side_effect=ValueError("bad array")):
            audio = AudioManager(audio_enabled=True)

        assert all(variants == [] for variants in audio.sounds.values())
        audio.play_fire_sound()
        audio.play_explosion_sound(heavy=True)
        audio.play_game_over_sound()
        audio.play_level_start_sound()

    def test_play_with_audio_disabled(self, pygame_init):
        audio = AudioManager(audio_enabled=False)
        audio.play_fire_sound()
        audio.play_explosion_sound()
        audio.play_explosion_sound(heavy=True)
        audio.play_game_over_sound()
        audio.play_level_start_sound()
        audio.toggle_mute()
        audio.set_volume(0.2)


class TestSynthesis:
    """Tests for the generated waveforms."""

    SAMPLE_RATE = 22050

    def test_waves_in_range(self):
        noise = np.random.default_rng(0)
        waves = [
            synth_fire(self.SAMPLE_RATE, noise),
            synth_explosion(self.SAMPLE_RATE, noise),
            synth_explosion(self.SAMPLE_RATE, noise, heavy=True, pitch=1.1),
            synth_game_over(self.SAMPLE_RATE),
            synth_level_start(self.SAMPLE_RATE),
            synth_ambient(self.SAMPLE_RATE),
        ]
        for wave in waves:
            assert wave.ndim == 1
            assert len(wave) > 0
            assert np.all(np.isfinite(wave))

    def test_heavy_explosion_lasts_longer(self):
        noise = np.random.default_rng(0)
        light = synth_explosion(self.SAMPLE_RATE, noise)
        heavy = synth_explosion(self.SAMPLE_RATE, noise, heavy=True)
        assert len(heavy) > len(light)

    def test_fire_is_short(self):
        wave = synth_fire(self.SAMPLE_RATE, np.random.default_rng(0))
        assert len(wave) / self.SAMPLE_RATE < 0.25


class TestEventDispatch:
    """Tests for mapping game events to sounds."""

    def test_fired(self, quiet_audio):
        quiet_audio.handle_events([FiredEvent(0, Point(100, 100))])
        quiet_audio.play_fire_sound.assert_called_once()

    def test_explosion(self, quiet_audio):
        quiet_audio.handle_events([ExplosionEvent(Point(100, 100), 50)])
        quiet_audio.play_explosion_sound.assert_called_once_with()

    def test_structure_hit_plays_heavy_once(self, quiet_audio):
        impact = Point(100, GROUND_Y)
        quiet_audio.handle_events([
            StructureDestroyedEvent(0, impact),
            ExplosionEvent(impact, 20, hit_structure=True),
        ])
        quiet_audio.play_explosion_sound.assert_called_once_with(heavy=True)

    def test_game_over(self, quiet_audio):
        quiet_audio.handle_events([GameOverEvent(100, 100, True)])
        quiet_audio.play_game_over_sound.assert_called_once()

    def test_level_started(self, quiet_audio):
        quiet_audio.handle_events([LevelStartedEvent(2)])
        quiet_audio.play_level_start_sound.assert_called_once()

    def test_events_from_a_real_tick(self, game, quiet_audio):
        s = game.structures[0]
        game.add_incoming(Point(s.aim_point.x, GROUND_Y - 5), s.aim_point, speed=10.0)
        game.fire(Point(400, 300))
        game.simulate(1)

        quiet_audio.handle_events(game.events)

        quiet_audio.play_fire_sound.assert_called_once()
        quiet_audio.play_explosion_sound.assert_called_once_with(heavy=True)

    def test_restart_is_silent(self, game, quiet_audio):
        for s in game.structures.values():
            game.add_incoming(Point(s.aim_point.x, GROUND_Y - 5), s.aim_point, speed=10.0)
        game.simulate(1)
        game.restart()
        game.simulate(1)

        quiet_audio.handle_events(game.events)
        quiet_audio.play_level_start_sound.assert_not_called()


class TestMuteAndVolume:
    """Tests for mute and volume controls."""

    def test_play_uses_sound(self):
        audio = AudioManager(audio_enabled=False, rng=random.Random(1))
        sounds = mock_sounds(audio)

        audio.play_fire_sound()
        audio.play_explosion_sound(heavy=True)

        sounds['fire'][0].play.assert_called_once()
        sounds['heavy_explosion'][0].play.assert_called_once()
        sounds['explosion'][0].play.assert_not_called()

    def test_muted_plays_nothing(self):
        audio = AudioManager(audio_enabled=False)
        sounds = mock_sounds(audio)

        audio.toggle_mute()
        audio.play_fire_sound()
        audio.play_game_over_sound()

        assert audio.muted
        sounds['fire'][0].play.assert_not_called()
        sounds['game_over'][0].play.assert_not_called()

    def test_mute_silences_and_restores(self):
        audio = AudioManager(audio_enabled=False, volume=0.5)
        sounds = mock_sounds(audio)

        audio.toggle_mute()
        sounds['fire'][0].set_volume.assert_called_with(0.0)
        sounds['ambient'][0].set_volume.assert_called_with(0.0)

        audio.toggle_mute()
        sounds['fire'][0].set_volume.assert_called_with(0.5)
        sounds['ambient'][0].set_volume.assert_called_with(AMBIENT_VOLUME)

    def test_volume_clamped(self):
        audio = AudioManager(audio_enabled=False)
        audio.set_volume(3.0)
        assert audio.volume == 1.0
        audio.set_volume(-1.0)
        assert audio.volume == 0.0

    def test_change_volume_steps(self):
        audio = AudioManager(audio_enabled=False, volume=0.6)
        audio.change_volume(VOLUME_STEP)
        assert audio.volume == pytest.approx(0.65)
        audio.change_volume(-2 * VOLUME_STEP)
        assert audio.volume == pytest.approx(0.55)

    def test_ambient_loops(self):
        audio = AudioManager(audio_enabled=False)
        sounds = mock_sounds(audio)

        audio.start_ambient()
        audio.start_ambient()

        sounds['ambient'][0].play.assert_called_once_with(loops=-1)
        audio.stop_ambient()
        assert audio.ambient_channel is None


class TestAudioKeys:
    """Tests for the audio controls in the input handler."""

    def key(self, code):
        return pygame.event.Event(pygame.KEYDOWN, key=code)

    def test_m_toggles_mute(self, game):
        audio = AudioManager(audio_enabled=False)
        handler = InputHandler(game, audio)

        handler.handle_event(self.key(pygame.K_m))
        assert audio.muted
        handler.handle_event(self.key(pygame.K_m))
        assert not audio.muted

    def test_volume_keys(self, game):
        audio = AudioManager(audio_enabled=False, volume=0.5)
        handler = InputHandler(game, audio)

        handler.handle_event(self.key(pygame.K_EQUALS))
        assert audio.volume == pytest.approx(0.55)
        handler.handle_event(self.key(pygame.K_MINUS))
        handler.handle_event(self.key(pygame.K_MINUS))
        assert audio.volume == pytest.approx(0.45)

    def test_mute_key_does_not_restart(self, game):
        audio = AudioManager(audio_enabled=False)
        handler = InputHandler(game, audio)
        for s in game.structures.values():
            game.add_incoming(Point(s.aim_point.x, GROUND_Y - 5), s.aim_point, speed=10.0)
        game.simulate(1)

        handler.handle_event(self.key(pygame.K_m))
        game.simulate(1)

        assert game.is_game_over
        assert audio.muted

    def test_audio_keys_without_audio(self, game):
        handler = InputHandler(game)
        assert handler.handle_event(self.key(pygame.K_m)) is False
        assert not game.is_paused

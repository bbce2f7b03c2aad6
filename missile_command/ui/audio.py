"""
Audio - procedurally generated sound effects driven by game events.
This is a THIN ADAPTER - no game logic here.

Every sound is synthesized with numpy when the AudioManager starts:
- fire: a falling square-wave zap with a noise snap
- explosion / heavy explosion: filtered noise burst, echo and a sub-bass thump
- game over: a descending sawtooth jingle
- level start: a rising sine arpeggio
- ambient: a low detuned hum, looped
"""
import logging
import random
from typing import Callable, Dict, Iterable, List, Optional

import numpy as np
import pygame

from missile_command.gameplay.events import (
    GameEvent, ExplosionEvent, FiredEvent, GameOverEvent, LevelStartedEvent,
    StructureDestroyedEvent,
)

logger = logging.getLogger(__name__)


SAMPLE_RATE = 22050
DEFAULT_VOLUME = 0.6
VOLUME_STEP = 0.05
AMBIENT_VOLUME = 0.04
FIRE_SOUND_DURATION_SEC = 0.16

# Explosions get a random pitch; a few pitched copies are rendered up front
EXPLOSION_VARIANTS = 3


def clamp_volume(volume: float) -> float:
    return max(0.0, min(1.0, float(volume)))


# =============================================================================
# SYNTHESIS HELPERS (float waves in [-1, 1])
# =============================================================================

def _times(duration: float, sample_rate: int) -> np.ndarray:
    return np.arange(int(duration * sample_rate)) / sample_rate


def _exp_ramp(start: float, end: float, t: np.ndarray, ramp_time: float) -> np.ndarray:
    """Exponential ramp from start to end over ramp_time seconds, then held."""
    progress = np.clip(t / ramp_time, 0.0, 1.0)
    return start * (end / start) ** progress


def _phase(frequencies: np.ndarray, sample_rate: int) -> np.ndarray:
    return np.cumsum(2.0 * np.pi * frequencies / sample_rate)


def _smooth(noise: np.ndarray, cutoff_hz: float, sample_rate: int) -> np.ndarray:
    """Crude low-pass: moving average, rescaled to keep its loudness."""
    width = max(1, int(round(sample_rate / cutoff_hz)))
    kernel = np.ones(width) / width
    return np.convolve(noise, kernel, mode="same") * np.sqrt(width)


def _note(freq: float, start: float, length: float, peak: float, release: float,
          shape: Callable[[np.ndarray], np.ndarray], t: np.ndarray) -> np.ndarray:
    """One enveloped note placed at start seconds into a longer buffer."""
    local = t - start
    phase = 2.0 * np.pi * freq * local
    attack = _exp_ramp(0.001, peak, local, 0.02)
    decay = _exp_ramp(peak, 0.0001, local - 0.02, release - 0.02)
    envelope = np.where(local < 0.02, attack, decay)
    gate = (local >= 0) & (local < length)
    return shape(phase) * envelope * gate


def _sawtooth(phase: np.ndarray) -> np.ndarray:
    cycles = phase / (2.0 * np.pi)
    return 2.0 * (cycles - np.floor(cycles + 0.5))


def synth_fire(sample_rate: int, noise_rng: np.random.Generator) -> np.ndarray:
    t = _times(FIRE_SOUND_DURATION_SEC + 0.02, sample_rate)

    freqs = _exp_ramp(1500.0, 500.0, t, 0.14)
    tone = np.sign(np.sin(_phase(freqs, sample_rate)))
    attack = _exp_ramp(0.0001, 0.3, t, 0.01)
    decay = _exp_ramp(0.3, 0.0001, t - 0.01, FIRE_SOUND_DURATION_SEC - 0.01)
    tone *= np.where(t < 0.01, attack, decay)

    snap = noise_rng.uniform(-1.0, 1.0, len(t)) * _exp_ramp(0.4, 0.0001, t, 0.04)
    snap *= t < 0.05

    return tone + snap


def synth_explosion(sample_rate: int, noise_rng: np.random.Generator,
                    heavy: bool = False, pitch: float = 1.0) -> np.ndarray:
    duration = 1.4 if heavy else 1.0
    echo_delay = 0.15
    t = _times(duration + 3 * echo_delay, sample_rate)

    # Noise burst whose brightness falls from ~1500 Hz to ~150 Hz
    noise = noise_rng.uniform(-1.0, 1.0, len(t))
    bright = _smooth(noise, 1500.0 * pitch, sample_rate)
    dark = _smooth(noise, 150.0 * pitch, sample_rate)
    sweep = np.clip(t / (duration * 0.8), 0.0, 1.0)
    body = (bright * (1.0 - sweep) + dark * sweep) * 0.5
    body *= _exp_ramp(1.0 if heavy else 0.8, 0.0001, t, duration * 0.9) * (t < duration)

    # Echo: 0.15 s delay line with 0.25 feedback
    wave = body.copy()
    shift = int(echo_delay * sample_rate)
    for repeat in range(1, 4):
        offset = shift * repeat
        if offset >= len(t):
            break
        wave[offset:] += body[:-offset] * 0.25 ** (repeat - 1) * 0.5

    # Sub-bass thump through a soft clipper
    freqs = _exp_ramp((70.0 if heavy else 90.0) * pitch, 30.0 * pitch, t, 0.5)
    triangle = (2.0 / np.pi) * np.arcsin(np.sin(_phase(freqs, sample_rate)))
    drive = 5.0 if heavy else 2.0
    thump = np.tanh(drive * triangle) / np.tanh(drive)
    thump *= _exp_ramp(1.2 if heavy else 0.7, 0.0001, t, 0.6) * (t < 0.7)

    return (wave + thump) * 0.5


def synth_game_over(sample_rate: int) -> np.ndarray:
    notes = [700.0, 530.0, 400.0, 250.0]
    t = _times(0.22 * len(notes), sample_rate)
    wave = np.zeros(len(t))
    for i, freq in enumerate(notes):
        wave += _note(freq, i * 0.22, 0.2, 0.35, 0.18, _sawtooth, t)
    return wave


def synth_level_start(sample_rate: int) -> np.ndarray:
    notes = [440.0, 554.37, 659.25, 880.0]
    t = _times(0.1 * len(notes) + 0.05, sample_rate)
    wave = np.zeros(len(t))
    for i, freq in enumerate(notes):
        wave += _note(freq, i * 0.1, 0.1, 0.3, 0.08, np.sin, t)
    return wave


def synth_ambient(sample_rate: int) -> np.ndarray:
    # 5 s holds a whole number of cycles of both tones, so the loop is seamless
    t = _times(5.0, sample_rate)
    return 0.5 * (np.sin(2.0 * np.pi * 30.0 * t) + np.sin(2.0 * np.pi * 30.2 * t))


# =============================================================================
# AUDIO MANAGER
# =============================================================================

class AudioManager:
    """
    Plays sound effects in response to game events.

    If the mixer cannot be opened (no audio device, headless machine),
    audio is disabled and every play method becomes a no-op. A sound that
    fails to render is simply skipped.

    Usage:
        audio = AudioManager(volume=settings.volume)
        audio.start_ambient()
        while running:
            game.tick(now_ms)
            audio.handle_events(game.events)
    """

    def __init__(
        self,
        audio_enabled: bool = True,
        volume: float = DEFAULT_VOLUME,
        muted: bool = False,
        rng: Optional[random.Random] = None
    ):
        self.audio_enabled = audio_enabled
        self.volume = clamp_volume(volume)
        self.muted = muted
        self.rng = rng if rng is not None else random.Random()
        self.sounds: Dict[str, List[pygame.mixer.Sound]] = {}
        self.ambient_channel: Optional[pygame.mixer.Channel] = None

        self.sample_rate = SAMPLE_RATE
        self.channels = 2

        if self.audio_enabled:
            self._init_audio()

    def _init_audio(self) -> None:
        """Open the mixer and render every sound."""
        try:
            pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=2, buffer=512)
            self.sample_rate, _, self.channels = pygame.mixer.get_init()
        except (pygame.error, TypeError) as e:
            logger.warning(f"Audio unavailable, continuing without sound: {e}")
            self.audio_enabled = False
            self.sounds = {}
            return

        noise_rng = np.random.default_rng(self.rng.randrange(2 ** 32))
        sr = self.sample_rate

        self.sounds = {
            'fire': self._render([lambda: synth_fire(sr, noise_rng)]),
            'explosion': self._render([
                lambda: synth_explosion(sr, noise_rng, heavy=False, pitch=self._random_pitch(0.2))
                for _ in range(EXPLOSION_VARIANTS)
            ]),
            'heavy_explosion': self._render([
                lambda: synth_explosion(sr, noise_rng, heavy=True, pitch=self._random_pitch(0.4))
                for _ in range(EXPLOSION_VARIANTS)
            ]),
            'game_over': self._render([lambda: synth_game_over(sr)]),
            'level_start': self._render([lambda: synth_level_start(sr)]),
            'ambient': self._render([lambda: synth_ambient(sr)]),
        }
        self._apply_volume()
        logger.info(f"Audio ready at {sr} Hz, {self.channels} channel(s)")

    def _random_pitch(self, spread: float) -> float:
        return 1.0 + (self.rng.random() - 0.5) * spread

    def _render(self, builders: List[Callable[[], np.ndarray]]) -> List[pygame.mixer.Sound]:
        """Turn float waves into mixer Sounds, skipping any that fail."""
        sounds = []
        for build in builders:
            try:
                sounds.append(self._make_sound(build()))
            except (pygame.error, ValueError) as e:
                logger.warning(f"Could not generate sound: {e}")
        return sounds

    def _make_sound(self, wave: np.ndarray) -> pygame.mixer.Sound:
        samples = (np.clip(wave, -1.0, 1.0) * 32767).astype(np.int16)
        if self.channels > 1:
            samples = np.column_stack([samples] * self.channels)
        return pygame.sndarray.make_sound(np.ascontiguousarray(samples))

    # =========================================================================
    # VOLUME
    # =========================================================================

    def _apply_volume(self) -> None:
        effects = 0.0 if self.muted else self.volume
        ambient = 0.0 if self.muted else AMBIENT_VOLUME
        for name, variants in self.sounds.items():
            for sound in variants:
                sound.set_volume(ambient if name == 'ambient' else effects)

    def set_volume(self, volume: float) -> None:
        self.volume = clamp_volume(volume)
        self._apply_volume()

    def change_volume(self, delta: float) -> None:
        """Nudge the volume, e.g. by +/- VOLUME_STEP."""
        self.set_volume(round(self.volume + delta, 2))
        logger.info(f"Volume {self.volume:.2f}")

    def toggle_mute(self) -> None:
        self.muted = not self.muted
        self._apply_volume()
        logger.info("Audio muted" if self.muted else "Audio unmuted")

    # =========================================================================
    # PLAYBACK
    # =========================================================================

    def _play(self, name: str) -> None:
        if not self.audio_enabled or self.muted:
            return
        variants = self.sounds.get(name)
        if not variants:
            return
        try:
            self.rng.choice(variants).play()
        except pygame.error as e:
            logger.warning(f"Could not play {name} sound: {e}")

    def play_fire_sound(self) -> None:
        self._play('fire')

    def play_explosion_sound(self, heavy: bool = False) -> None:
        """Explosion; heavy is the louder, deeper one used when a structure falls."""
        self._play('heavy_explosion' if heavy else 'explosion')

    def play_game_over_sound(self) -> None:
        self._play('game_over')

    def play_level_start_sound(self) -> None:
        self._play('level_start')

    def start_ambient(self) -> None:
        """Loop the background hum. It keeps running while muted, at zero volume."""
        if not self.audio_enabled or self.ambient_channel is not None:
            return
        variants = self.sounds.get('ambient')
        if not variants:
            return
        try:
            self.ambient_channel = variants[0].play(loops=-1)
        except pygame.error as e:
            logger.warning(f"Could not start ambient sound: {e}")

    def stop_ambient(self) -> None:
        if self.ambient_channel is not None:
            self.ambient_channel.stop()
            self.ambient_channel = None

    def handle_events(self, events: Iterable[GameEvent]) -> None:
        """
        Play one sound per event from the latest tick.

        A structure hit produces a StructureDestroyedEvent followed by an
        ExplosionEvent flagged hit_structure; only the heavy explosion plays.
        """
        for event in events:
            if isinstance(event, FiredEvent):
                self.play_fire_sound()
            elif isinstance(event, StructureDestroyedEvent):
                self.play_explosion_sound(heavy=True)
            elif isinstance(event, ExplosionEvent):
                if not event.hit_structure:
                    self.play_explosion_sound()
            elif isinstance(event, GameOverEvent):
                self.play_game_over_sound()
            elif isinstance(event, LevelStartedEvent):
                self.play_level_start_sound()

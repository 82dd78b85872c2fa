"""
Sound effect player.

Plays fire-and-forget samples through pygame.mixer. Each effect is a
group of interchangeable variants ("roll" -> roll_1.wav ... roll_5.wav);
playing the group picks one variant at random so repeated actions do not
sound identical.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path

import pygame

from engine.core.events import EventBus, AudioEvent

ROLL_VARIANTS = [f"SingleRoll_{i}.wav" for i in range(1, 6)]
MULTI_ROLL_VARIANTS = [f"MultiRoll_{i}.wav" for i in range(1, 6)]


class SfxPlayer:
    """
    Sound effect groups with lazy loading and caching.

    A missing mixer or missing file is logged and the effect is skipped;
    sound problems never interrupt the game.
    """

    def __init__(
        self,
        base_path: Path | str = "",
        event_bus: EventBus | None = None,
        rng: random.Random | None = None,
    ):
        self._base_path = Path(base_path)
        self.event_bus = event_bus
        self._rng = rng or random.Random()

        self._groups: dict[str, list[str]] = {
            "roll": ROLL_VARIANTS,
            "roll_multi": MULTI_ROLL_VARIANTS,
        }
        self._sound_cache: dict[str, pygame.mixer.Sound] = {}
        self._missing: set[str] = set()
        self._volume: float = 1.0
        self._initialized: bool = False

    def init(self, frequency: int = 44100, size: int = -16, channels: int = 2, buffer: int = 512) -> None:
        """Initialize the mixer."""
        if pygame.mixer.get_init():
            self._initialized = True
            return

        try:
            pygame.mixer.init(frequency=frequency, size=size, channels=channels, buffer=buffer)
            pygame.mixer.set_num_channels(16)
            self._initialized = True
            logging.info("Audio system initialized.")
        except pygame.error as e:
            logging.error(f"Failed to initialize audio system: {e}")

    def quit(self) -> None:
        pygame.mixer.quit()
        self._initialized = False

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, value: float) -> None:
        self._volume = max(0.0, min(1.0, value))

    def register_group(self, name: str, files: list[str]) -> None:
        """Add or replace an effect group."""
        self._groups[name] = list(files)

    # Battle triggers

    def roll(self) -> pygame.mixer.Channel | None:
        """Single die reroll sound."""
        return self.play_group("roll")

    def roll_multi(self) -> pygame.mixer.Channel | None:
        """Commit / reroll-all sound."""
        return self.play_group("roll_multi")

    # Playback

    def play_group(self, name: str) -> pygame.mixer.Channel | None:
        """Play a random variant of an effect group."""
        variants = self._groups.get(name)
        if not variants:
            logging.warning(f"Unknown sound group: {name}")
            return None
        return self.play(self._rng.choice(variants))

    def play(self, file_name: str) -> pygame.mixer.Channel | None:
        """
        Play a single sample.

        Returns:
            The channel used, or None if nothing was played.
        """
        sound = self._get_sound(file_name)
        if not sound:
            return None

        channel = pygame.mixer.find_channel(True)
        if not channel:
            return None

        channel.set_volume(self._volume)
        channel.play(sound)

        if self.event_bus:
            self.event_bus.publish(AudioEvent.SFX_PLAYED, file=file_name)

        return channel

    def _get_sound(self, file_name: str) -> pygame.mixer.Sound | None:
        if not self._initialized:
            return None

        if file_name in self._missing:
            return None

        if file_name not in self._sound_cache:
            file_path = self._base_path / file_name
            if not file_path.exists():
                logging.warning(f"Audio file not found: {file_path}")
                self._missing.add(file_name)
                return None
            try:
                self._sound_cache[file_name] = pygame.mixer.Sound(str(file_path))
            except pygame.error as e:
                logging.error(f"Failed to load sound {file_path}: {e}")
                return None

        return self._sound_cache[file_name]

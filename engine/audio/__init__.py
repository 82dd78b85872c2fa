"""Audio module."""

from engine.audio.sfx import SfxPlayer

__all__ = ["SfxPlayer"]

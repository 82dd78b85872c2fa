"""
Debug HUD - a text and rectangle view of the battle.

Reads only the render accessors of CombatState, the battle system and the
animation sequencer. Stands in for sprite rendering.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pygame

from dicebattle.animation import (
    HealPulseAnimation,
    ProjectileAnimation,
    ShieldAppearAnimation,
    ShieldBreakAnimation,
    Side,
)

if TYPE_CHECKING:
    from dicebattle.system import BattleSystem

WHITE = (255, 255, 255)
GREY = (120, 120, 120)
RED = (220, 60, 60)
BLUE = (80, 140, 255)
GREEN = (80, 220, 120)
YELLOW = (250, 220, 80)

BAR_WIDTH = 100
DIE_SPACING = 40
DIE_ROW_Y = 120
SHIP_Y = 8
PROJECTILE_Y = 40
SHIELD_SPACING = 11


class BattleHud:
    """Draws one battle onto a surface."""

    def __init__(self, font_size: int = 14):
        self.font = pygame.font.SysFont("monospace", font_size)

    def draw(self, surface: pygame.Surface, battle: BattleSystem) -> None:
        state = battle.state

        self._draw_actor(surface, "YOU", state.player, 12, GREEN)
        self._draw_actor(surface, "ENEMY", state.enemy, surface.get_width() - BAR_WIDTH - 12, RED)

        for slot, display in enumerate(state.attack_displays()):
            y = 70 + slot * 16
            if display is None:
                self._text(surface, f"slot {slot}: --", (surface.get_width() - 150, y), GREY)
                continue
            self._text(surface, f"{display.kind.name} {display.value}", (surface.get_width() - 150, y), YELLOW)
            width = int(60 * display.cooldown_fraction)
            pygame.draw.rect(surface, YELLOW, (surface.get_width() - 60, y + 4, width, 4))

        for i, (face, cooldown) in enumerate(state.faces_to_render()):
            x = 28 + i * DIE_SPACING
            colour = WHITE if i == battle.selected_die else GREY
            pygame.draw.rect(surface, colour, (x - 4, DIE_ROW_Y - 4, 32, 32), 1)
            self._text(surface, face.value[:3], (x, DIE_ROW_Y + 4), colour)
            if cooldown is not None:
                pygame.draw.rect(surface, RED, (x, DIE_ROW_Y - 10, int(24 * cooldown), 3))

        self._draw_animations(surface, battle)

        if not battle.is_active:
            self._text(surface, battle.outcome.name, (surface.get_width() // 2 - 30, 160), WHITE)

    def _draw_actor(self, surface, label, actor, x, colour) -> None:
        self._text(surface, f"{label} {actor.health}/{actor.max_health}", (x, SHIP_Y), colour)
        pygame.draw.rect(surface, GREY, (x, SHIP_Y + 18, BAR_WIDTH, 5), 1)
        pygame.draw.rect(surface, colour, (x, SHIP_Y + 18, int(BAR_WIDTH * actor.health_fraction), 5))
        for i in range(actor.shield_count):
            pygame.draw.rect(surface, BLUE, (x + i * SHIELD_SPACING, SHIP_Y + 28, 8, 8))

    def _draw_animations(self, surface, battle: BattleSystem) -> None:
        for animation in battle.sequencer.active:
            if isinstance(animation, ProjectileAnimation):
                pygame.draw.rect(surface, YELLOW, (animation.x, PROJECTILE_Y, 4, 2))

            elif isinstance(animation, ShieldBreakAnimation):
                if animation.is_dissolving:
                    x = self._shield_x(surface, animation.target_side, 0)
                    size = 8 - animation.dissolve_step
                    pygame.draw.rect(surface, BLUE, (x, SHIP_Y + 28, size, size), 1)
                else:
                    pygame.draw.rect(surface, YELLOW, (animation.projectile.x, PROJECTILE_Y, 4, 2))

            elif isinstance(animation, ShieldAppearAnimation):
                x = self._shield_x(surface, animation.side, animation.slot)
                pygame.draw.rect(surface, WHITE, (x, SHIP_Y + 28, 8, 8), max(1, animation.steps_left))

            elif isinstance(animation, HealPulseAnimation):
                x = 12 if animation.side is Side.PLAYER else surface.get_width() - BAR_WIDTH - 12
                if (animation.frame // 5) % 2 == 0:
                    pygame.draw.rect(surface, GREEN, (x - 2, SHIP_Y + 16, BAR_WIDTH + 4, 9), 1)

    def _shield_x(self, surface, side: Side, slot: int) -> int:
        base = 12 if side is Side.PLAYER else surface.get_width() - BAR_WIDTH - 12
        return base + slot * SHIELD_SPACING

    def _text(self, surface, text: str, pos: tuple[int, int], colour) -> None:
        surface.blit(self.font.render(text, True, colour), pos)

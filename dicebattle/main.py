"""
Dice Battle entry point.

Controls:
- Left/Right: select die
- Z/Space: reroll selected die
- Enter: commit the roll
- P: pause
- Escape: quit
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from engine.core.game import Game, GameConfig
from dicebattle.config import BattleConfig, load_player_dice
from dicebattle.hud import BattleHud
from dicebattle.scene import BattleScene


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Dice-driven space battles.")
    parser.add_argument("--level", type=int, default=1, help="starting level")
    parser.add_argument("--seed", type=int, default=None, help="seed for replayable battles")
    parser.add_argument("--loadout", default="starter", help="dice loadout id")
    parser.add_argument("--data", type=Path, default=Path("data"), help="data directory")
    parser.add_argument("--sfx", default="assets/sfx", help="sound effect directory")
    parser.add_argument("--log-level", default="INFO", help="logging level")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = BattleConfig(
        starting_level=args.level,
        seed=args.seed,
        loadout=args.loadout,
        data_path=args.data,
    )
    player_dice = load_player_dice(config)

    game = Game(GameConfig(sfx_path=args.sfx))
    game.scene_manager.push(
        BattleScene(game, config, player_dice, config.starting_level, BattleHud())
    )
    game.run()


if __name__ == "__main__":
    main()

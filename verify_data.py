import sys
import logging
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent))

from engine.resources.database import Database
from dicebattle.dice import PlayerDice

def main():
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger("DataVerification")

    try:
        db = Database(Path(__file__).parent / "data")

        logger.info("Loading database...")
        db.load_all()

        assert db.get_loadout("starter") is not None, "Missing starter loadout"

        # Every loadout must turn into playable dice
        for loadout_id, record in db.loadouts.items():
            dice = PlayerDice.from_loadout(record)
            logger.info(f"{loadout_id}: {len(dice)} dice")

        logger.info("VERIFICATION SUCCESSFUL: All loadouts loaded and validated.")

    except Exception as e:
        logger.error(f"VERIFICATION FAILED: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()

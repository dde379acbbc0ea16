import os
from dotenv import load_dotenv

from americano.models import PenaltyConfig

load_dotenv()

HIGH_TEAMMATE_REPEAT_PENALTY = int(os.getenv("AMERICANO_HIGH_TEAMMATE_REPEAT_PENALTY", "20"))
LOW_TEAMMATE_REPEAT_PENALTY = int(os.getenv("AMERICANO_LOW_TEAMMATE_REPEAT_PENALTY", "2"))
OPPONENT_REPEAT_PENALTY = int(os.getenv("AMERICANO_OPPONENT_REPEAT_PENALTY", "1"))

# Unset means every process schedules differently
SEED = os.getenv("AMERICANO_SEED")
SEED = int(SEED) if SEED else None

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

PENALTIES = PenaltyConfig(
    high_teammate_repeat=HIGH_TEAMMATE_REPEAT_PENALTY,
    low_teammate_repeat=LOW_TEAMMATE_REPEAT_PENALTY,
    opponent_repeat=OPPONENT_REPEAT_PENALTY,
)

"""Centralized arena constants.

Game rules that are not deployment settings live here. Tunable limits and
timeouts are in ``pokearena.config``.
"""

# ------------------------------------------------------------------ #
# Battle identity
# ------------------------------------------------------------------ #
BOT_OPPONENT_ID: str = "bot"
BOT_DISPLAY_NAME: str = "Bot"
PLAYER_DISPLAY_NAME: str = "You"
BOT_BATTLE_PREFIX: str = "bot_"
CHALLENGE_PREFIX: str = "challenge_"

BATTLE_TYPE_BOT: str = "bot"
BATTLE_TYPE_PVP: str = "player-vs-player"

# ------------------------------------------------------------------ #
# Results
# ------------------------------------------------------------------ #
RESULT_WON: str = "won"
RESULT_LOST: str = "lost"
RESULT_TIE: str = "tie"

MIRRORED_RESULT: dict[str, str] = {
    RESULT_WON: RESULT_LOST,
    RESULT_LOST: RESULT_WON,
    RESULT_TIE: RESULT_TIE,
}

# ------------------------------------------------------------------ #
# Scoring
# ------------------------------------------------------------------ #
STAT_COUNT: int = 6  # HP, Attack, Defense, Sp. Attack, Sp. Defense, Speed
HP_WEIGHT: float = 0.3
ATTACK_WEIGHT: float = 0.4
DEFENSE_WEIGHT: float = 0.2
SPEED_WEIGHT: float = 0.1
RANDOM_SPREAD: float = 2.0  # random term is uniform in [0, RANDOM_SPREAD)

# ------------------------------------------------------------------ #
# Leaderboard points
# ------------------------------------------------------------------ #
POINTS_PER_WIN: int = 3
POINTS_PER_DRAW: int = 1

# ------------------------------------------------------------------ #
# Type effectiveness chart (18 canonical Pokemon types)
# ------------------------------------------------------------------ #
# Format: ATTACKING_TYPE -> {DEFENDING_TYPE: multiplier}
TYPE_CHART: dict[str, dict[str, float]] = {
    "normal": {"rock": 0.5, "ghost": 0, "steel": 0.5},
    "fire": {"fire": 0.5, "water": 0.5, "grass": 2, "ice": 2, "bug": 2, "rock": 0.5, "dragon": 0.5, "steel": 2},
    "water": {"fire": 2, "water": 0.5, "grass": 0.5, "ground": 2, "rock": 2, "dragon": 0.5},
    "electric": {"water": 2, "electric": 0.5, "grass": 0.5, "ground": 0, "flying": 2, "dragon": 0.5},
    "grass": {"fire": 0.5, "water": 2, "grass": 0.5, "poison": 0.5, "ground": 2, "flying": 0.5, "bug": 0.5, "rock": 2, "dragon": 0.5, "steel": 0.5},
    "ice": {"fire": 0.5, "water": 0.5, "grass": 2, "ice": 0.5, "ground": 2, "flying": 2, "dragon": 2, "steel": 0.5},
    "fighting": {"normal": 2, "ice": 2, "poison": 0.5, "flying": 0.5, "psychic": 0.5, "bug": 0.5, "rock": 2, "ghost": 0, "dark": 2, "steel": 2, "fairy": 0.5},
    "poison": {"grass": 2, "poison": 0.5, "ground": 0.5, "rock": 0.5, "ghost": 0.5, "steel": 0, "fairy": 2},
    "ground": {"fire": 2, "electric": 2, "grass": 0.5, "poison": 2, "flying": 0, "bug": 0.5, "rock": 2, "steel": 2},
    "flying": {"electric": 0.5, "grass": 2, "fighting": 2, "bug": 2, "rock": 0.5, "steel": 0.5},
    "psychic": {"fighting": 2, "poison": 2, "psychic": 0.5, "dark": 0, "steel": 0.5},
    "bug": {"fire": 0.5, "grass": 2, "fighting": 0.5, "poison": 0.5, "flying": 0.5, "psychic": 2, "ghost": 0.5, "dark": 2, "steel": 0.5, "fairy": 0.5},
    "rock": {"fire": 2, "ice": 2, "fighting": 0.5, "ground": 0.5, "flying": 2, "bug": 2, "steel": 0.5},
    "ghost": {"normal": 0, "psychic": 2, "ghost": 2, "dark": 0.5},
    "dragon": {"dragon": 2, "steel": 0.5, "fairy": 0},
    "dark": {"fighting": 0.5, "psychic": 2, "ghost": 2, "dark": 0.5, "fairy": 0.5},
    "steel": {"fire": 0.5, "water": 0.5, "electric": 0.5, "ice": 2, "rock": 2, "steel": 0.5, "fairy": 2},
    "fairy": {"fire": 0.5, "fighting": 2, "poison": 0.5, "dragon": 2, "dark": 2, "steel": 0.5},
}

# ------------------------------------------------------------------ #
# Navigation
# ------------------------------------------------------------------ #
BATTLE_REDIRECT_TEMPLATE: str = "/arena/battle?challengeId={challenge_id}"

"""Battle record builder.

A battle is scored once. The outcome is then projected two ways: a full
display payload for the live battle screen and a minimal storage record for
the battle history.
"""

import random
from dataclasses import dataclass
from typing import Any, Optional

from pokearena.core.constants import (
    BATTLE_TYPE_BOT,
    BATTLE_TYPE_PVP,
    BOT_OPPONENT_ID,
    MIRRORED_RESULT,
    RESULT_LOST,
    RESULT_TIE,
    RESULT_WON,
)
from pokearena.core.pokemon import PokemonSnapshot
from pokearena.core.scoring import calculate_battle_score


@dataclass
class BattleRecord:
    """Both projections of one scored battle, from side A's perspective."""

    display: dict[str, Any]
    storage: dict[str, Any]

    @property
    def result(self) -> str:
        return self.storage["result"]

    @property
    def battle_type(self) -> str:
        return self.display["battle_type"]


def determine_result(score_a: float, score_b: float) -> str:
    """Result from side A's perspective."""
    if score_a > score_b:
        return RESULT_WON
    elif score_b > score_a:
        return RESULT_LOST
    return RESULT_TIE


def create_combatant_record(pokemon: PokemonSnapshot, score: float) -> dict[str, Any]:
    """Minimal projection persisted into battle history."""
    return {
        "name": pokemon.name,
        "sprite": pokemon.sprite,
        "score": score,
    }


def build_battle(
    pokemon_a: PokemonSnapshot,
    pokemon_b: PokemonSnapshot,
    name_a: str,
    name_b: str,
    id_a: str,
    id_b: str,
    rng: Optional[random.Random] = None,
    type_effectiveness: bool = True,
) -> BattleRecord:
    """Score both sides and build the display and storage projections."""
    score_a = calculate_battle_score(
        pokemon_a, pokemon_b if type_effectiveness else None, rng=rng
    )
    score_b = calculate_battle_score(
        pokemon_b, pokemon_a if type_effectiveness else None, rng=rng
    )
    result = determine_result(score_a, score_b)
    is_bot = id_b == BOT_OPPONENT_ID

    display = {
        "player1_pokemon": {**pokemon_a.to_dict(), "battle_score": score_a},
        "player2_pokemon": {**pokemon_b.to_dict(), "battle_score": score_b},
        "player1_name": name_a,
        "player2_name": name_b,
        "player1_id": id_a,
        "player2_id": id_b,
        "battle_type": BATTLE_TYPE_BOT if is_bot else BATTLE_TYPE_PVP,
        "result": result,
    }

    storage: dict[str, Any] = {
        "my_pokemon": create_combatant_record(pokemon_a, score_a),
        "opponent_pokemon": create_combatant_record(pokemon_b, score_b),
        "result": result,
    }
    # Opponent name is only kept for player battles
    if not is_bot:
        storage["opponent_name"] = name_b

    return BattleRecord(display=display, storage=storage)


def mirror_storage(storage: dict[str, Any], name_a: str) -> dict[str, Any]:
    """The same storage record seen from side B."""
    return {
        "my_pokemon": dict(storage["opponent_pokemon"]),
        "opponent_pokemon": dict(storage["my_pokemon"]),
        "result": MIRRORED_RESULT[storage["result"]],
        "opponent_name": name_a,
    }

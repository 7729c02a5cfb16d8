"""Battle scoring engine."""

import random
from typing import Iterable, Optional

from pokearena.core.constants import (
    ATTACK_WEIGHT,
    DEFENSE_WEIGHT,
    HP_WEIGHT,
    RANDOM_SPREAD,
    SPEED_WEIGHT,
    TYPE_CHART,
)
from pokearena.core.pokemon import PokemonSnapshot


def get_type_effectiveness(
    attacking_types: Iterable[str], defending_types: Iterable[str]
) -> float:
    """Calculate the combined type multiplier of every attacker/defender pair.

    Pairs missing from the chart count as 1.
    """
    defending = [t.lower() for t in defending_types]
    multiplier = 1.0

    for atk_type in attacking_types:
        chart = TYPE_CHART.get(atk_type.lower())
        if not chart:
            continue
        for def_type in defending:
            multiplier *= chart.get(def_type, 1.0)

    return multiplier


def calculate_base_score(pokemon: PokemonSnapshot, type_multiplier: float = 1.0) -> float:
    """Weighted stat total without the random term."""
    return (
        pokemon.hp * HP_WEIGHT
        + pokemon.attack * ATTACK_WEIGHT * type_multiplier
        + pokemon.defense * DEFENSE_WEIGHT
        + pokemon.speed * SPEED_WEIGHT
    )


def calculate_battle_score(
    pokemon: PokemonSnapshot,
    opponent: Optional[PokemonSnapshot] = None,
    rng: Optional[random.Random] = None,
) -> float:
    """Score a Pokemon for a single battle.

    When ``opponent`` is given the Attack term is weighted by type
    effectiveness against it. A random value in ``[0, 2)`` is always added,
    so two calls never describe the same battle.
    """
    multiplier = 1.0
    if opponent is not None:
        multiplier = get_type_effectiveness(pokemon.types, opponent.types)

    roll = (rng or random).random() * RANDOM_SPREAD
    return calculate_base_score(pokemon, multiplier) + roll

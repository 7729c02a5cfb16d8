"""Pokemon snapshots fetched from the external data source."""

from dataclasses import dataclass, field
from typing import Any

from pokearena.core.constants import STAT_COUNT
from pokearena.core.errors import MalformedPokemonDataError


@dataclass(frozen=True)
class PokemonSnapshot:
    """Point-in-time copy of a Pokemon's battle-relevant data.

    ``stats`` holds the six base stats in PokeAPI order:
    HP, Attack, Defense, Special-Attack, Special-Defense, Speed.
    """

    id: int
    name: str
    types: tuple[str, ...]
    stats: tuple[int, ...]
    abilities: tuple[str, ...] = ()
    sprites: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if len(self.stats) < STAT_COUNT:
            raise MalformedPokemonDataError(
                f"Pokemon {self.name!r} has {len(self.stats)} stats, expected {STAT_COUNT}"
            )

    @property
    def hp(self) -> int:
        return self.stats[0]

    @property
    def attack(self) -> int:
        return self.stats[1]

    @property
    def defense(self) -> int:
        return self.stats[2]

    @property
    def speed(self) -> int:
        return self.stats[5]

    @property
    def sprite(self) -> str | None:
        """Front default sprite URL, if any."""
        return self.sprites.get("front_default")

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PokemonSnapshot":
        """Build a snapshot from a PokeAPI ``/pokemon/{id}`` payload.

        Also accepts the flattened shape produced by :meth:`to_dict`, since
        clients send back the objects they were given.
        """
        if not isinstance(data, dict):
            raise MalformedPokemonDataError("Pokemon data must be an object")

        try:
            types = tuple(
                t["type"]["name"] if isinstance(t, dict) else str(t)
                for t in data["types"]
            )
            stats = tuple(
                int(s["base_stat"]) if isinstance(s, dict) else int(s)
                for s in data["stats"]
            )
            abilities = tuple(
                a["ability"]["name"] if isinstance(a, dict) else str(a)
                for a in data.get("abilities") or []
            )
            return cls(
                id=int(data.get("id") or 0),
                name=str(data["name"]),
                types=types,
                stats=stats,
                abilities=abilities,
                sprites=dict(data.get("sprites") or {}),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedPokemonDataError(f"Invalid Pokemon data: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """Full representation for the live battle screen."""
        return {
            "id": self.id,
            "name": self.name,
            "types": list(self.types),
            "abilities": list(self.abilities),
            "stats": list(self.stats),
            "sprites": dict(self.sprites),
        }

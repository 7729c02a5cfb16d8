"""Client for the public PokeAPI REST service."""

import asyncio
from typing import Optional

import httpx

from pokearena.config import settings
from pokearena.core.errors import UpstreamFetchError
from pokearena.core.pokemon import PokemonSnapshot
from pokearena.logging import get_logger

logger = get_logger(__name__)


class PokeAPIClient:
    """Fetches Pokemon snapshots by id."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or settings.pokeapi_base_url).rstrip("/")
        self._client = client or httpx.AsyncClient(
            timeout=timeout or settings.pokeapi_timeout_seconds,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "PokeAPIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def fetch(self, pokemon_id: int) -> PokemonSnapshot:
        url = f"{self.base_url}/pokemon/{pokemon_id}"
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            logger.warning("PokeAPI request failed", pokemon_id=pokemon_id, error=str(e))
            raise UpstreamFetchError(f"Failed to fetch Pokemon #{pokemon_id}") from e

        if response.status_code != 200:
            logger.warning(
                "PokeAPI returned error",
                pokemon_id=pokemon_id,
                status=response.status_code,
            )
            raise UpstreamFetchError(
                f"Failed to fetch Pokemon #{pokemon_id}: HTTP {response.status_code}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamFetchError(f"Invalid response for Pokemon #{pokemon_id}") from e

        return PokemonSnapshot.from_api(data)

    async def fetch_many(self, *pokemon_ids: int) -> list[PokemonSnapshot]:
        """Fetch several snapshots concurrently. Any failure fails the batch."""
        return list(await asyncio.gather(*(self.fetch(pid) for pid in pokemon_ids)))

"""
Persona fixture store.

Each ``<persona>.json`` file in the fixtures directory holds one persona's
``{"accounts": [...], "transactions": [...]}``. The store is loaded once when
the application is built and is read-only afterwards, so handlers can share
it across concurrent requests without locking.
"""
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Union

from pydantic import ValidationError

from openbank.logging import get_logger
from openbank.schemas import PersonaData

logger = get_logger(__name__)


class FixtureLoadError(Exception):
    """Raised when the fixture directory cannot be turned into a store."""


class FixtureStore:
    """Immutable mapping from persona name to that persona's data."""

    def __init__(self, personas: Mapping[str, PersonaData]):
        self._personas = MappingProxyType(dict(personas))

    @classmethod
    def from_directory(cls, directory: Union[str, Path]) -> "FixtureStore":
        """
        Load every ``*.json`` file in ``directory``.

        Args:
            directory: Folder containing ``<persona>.json`` files

        Returns:
            A populated store keyed by file stem

        Raises:
            FixtureLoadError: If the folder is missing or a file is invalid
        """
        path = Path(directory)
        if not path.is_dir():
            raise FixtureLoadError(f"Fixture directory not found: {path}")

        personas: dict[str, PersonaData] = {}
        for file in sorted(path.glob("*.json")):
            try:
                personas[file.stem] = PersonaData.model_validate_json(file.read_bytes())
            except (OSError, ValidationError) as e:
                raise FixtureLoadError(f"Invalid fixture {file.name}: {e}") from e

        logger.info(
            "fixtures_loaded",
            directory=str(path),
            persona_count=len(personas),
            personas=sorted(personas),
        )
        return cls(personas)

    def get(self, persona: str) -> Optional[PersonaData]:
        return self._personas.get(persona)

    def personas(self) -> list[str]:
        return sorted(self._personas)

    def __contains__(self, persona: object) -> bool:
        return persona in self._personas

    def __iter__(self) -> Iterator[str]:
        return iter(self._personas)

    def __len__(self) -> int:
        return len(self._personas)

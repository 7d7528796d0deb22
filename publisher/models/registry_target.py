from dataclasses import field

from pydantic.dataclasses import dataclass

DOCKERHUB = "dockerhub"
GHCR = "ghcr"
GHCR_REGISTRY = "ghcr.io"


@dataclass(frozen=True)
class RegistryTarget:
    name: str
    image: str
    username: str
    token: str = field(repr=False)
    registry: str | None = None # None means Docker Hub

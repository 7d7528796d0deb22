from pydantic.dataclasses import dataclass

from .platform import Platform
from .registry_target import GHCR, RegistryTarget


@dataclass(frozen=True)
class ImageReferences:
    targets: tuple[RegistryTarget, ...] = ()

    @property
    def images(self) -> list[str]:
        return [t.image for t in self.targets]

    @property
    def push(self) -> bool:
        return bool(self.targets)

    def target(self, name: str) -> RegistryTarget | None:
        return next((t for t in self.targets if t.name == name), None)

    def cache_from(self, platform: Platform) -> str | None:
        ghcr = self.target(GHCR)
        if not ghcr:
            return None
        return f"type=registry,ref={ghcr.image}:buildcache-{platform.cache_suffix}"

    def cache_to(self, platform: Platform) -> str | None:
        cache_from = self.cache_from(platform)
        return f"{cache_from},mode=max" if cache_from else None

from pydantic.dataclasses import dataclass

from .build_request import BuildRequest
from .platform import DEFAULT_PLATFORMS, parse_platforms


@dataclass(frozen=True)
class ImageDefinition:
    name: str
    docker_path: str
    platforms: str = DEFAULT_PLATFORMS
    base_image: str | None = None
    base_app_image: str | None = None

    def to_request(self) -> BuildRequest:
        return BuildRequest(
            image_name=self.name,
            docker_path=self.docker_path,
            platforms=parse_platforms(self.platforms),
            base_image=self.base_image,
            base_app_image=self.base_app_image,
        )

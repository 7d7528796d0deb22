from pydantic.dataclasses import dataclass

from .platform import Platform

BASE_IMAGE_NAME = "base"
BASE_APP_IMAGE_NAME = "base-app"


@dataclass(frozen=True)
class BuildRequest:
    image_name: str
    docker_path: str
    platforms: tuple[Platform, ...]
    base_image: str | None = None
    base_app_image: str | None = None

    def validate(self) -> None:
        # image name is always required
        if not self.image_name:
            raise ValueError("image_name input is empty but required")
        if not self.docker_path:
            raise ValueError("docker_path input is empty but required")
        # base image is required unless building the base image itself
        if self.image_name != BASE_IMAGE_NAME and not self.base_image:
            raise ValueError("base_image input is empty but required")
        # base app image is required unless building base or base-app
        if self.image_name not in (BASE_IMAGE_NAME, BASE_APP_IMAGE_NAME) and not self.base_app_image:
            raise ValueError("base_app_image input is empty but required")

    @property
    def context(self) -> str:
        return f"./{self.docker_path.strip('/')}/{self.image_name}/build"

    @property
    def dockerfile(self) -> str:
        return f"{self.context}/Dockerfile"

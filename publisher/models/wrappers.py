from pydantic.dataclasses import dataclass

from publisher.models.image_definition import ImageDefinition

@dataclass(frozen=True)
class ImagesFile:
    images: list[ImageDefinition]

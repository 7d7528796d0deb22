from pydantic.dataclasses import dataclass


@dataclass(frozen=True)
class TagSet:
    images: list[str]
    tags: list[str]
    version: str | None = None

    @property
    def image_tag(self) -> str | None:
        return self.tags[0] if self.tags else None

    def for_image(self, image: str) -> list[str]:
        return [t for t in self.tags if t.startswith(f"{image}:")]

import re

from pydantic.dataclasses import dataclass

DIGEST_PREFIX = "sha256:"
_DIGEST = re.compile(r"^sha256:[a-f0-9]{64}$")


@dataclass(frozen=True)
class DigestArtifact:
    image_name: str
    platform_pair: str
    digest: str

    def __post_init__(self):
        if not _DIGEST.match(self.digest):
            raise ValueError(f"Invalid image digest '{self.digest}'")

    @classmethod
    def from_filename(cls, image_name: str, platform_pair: str, filename: str) -> "DigestArtifact":
        return cls(image_name, platform_pair, f"{DIGEST_PREFIX}{filename}")

    @property
    def filename(self) -> str:
        return self.digest.removeprefix(DIGEST_PREFIX)

    @property
    def artifact_name(self) -> str:
        return artifact_name(self.image_name, self.platform_pair)

    def source_ref(self, image: str) -> str:
        return f"{image}@{self.digest}"


def artifact_name(image_name: str, platform_pair: str) -> str:
    return f"digests-{image_name}-{platform_pair}"

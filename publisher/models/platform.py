import re

from pydantic.dataclasses import dataclass

DEFAULT_PLATFORMS = "linux/amd64"
_PART = re.compile(r"^[a-z0-9._-]+$")


@dataclass(frozen=True)
class Platform:
    os: str
    architecture: str
    variant: str | None = None

    @classmethod
    def parse(cls, text: str) -> "Platform":
        parts = [p.strip() for p in text.strip().split("/")]
        if len(parts) not in (2, 3) or not all(_PART.match(p) for p in parts):
            raise ValueError(f"Invalid platform '{text}', expected os/arch[/variant]")
        return cls(*parts)

    def __str__(self) -> str:
        return "/".join(p for p in (self.os, self.architecture, self.variant) if p)

    @property
    def pair(self) -> str:
        return str(self).replace("/", "-")

    @property
    def is_arm64(self) -> bool:
        return self.architecture == "arm64"

    @property
    def cache_suffix(self) -> str:
        return "arm64" if self.is_arm64 else "x86"

    @property
    def runner(self) -> str:
        return "ARM64" if self.is_arm64 else "ubuntu-latest"


def parse_platforms(text: str | None) -> tuple[Platform, ...]:
    """Parse a comma separated platform list, keeping the first occurrence of duplicates."""
    platforms: list[Platform] = []
    for item in (text if text is not None else DEFAULT_PLATFORMS).split(","):
        if not item.strip():
            continue
        platform = Platform.parse(item)
        if platform not in platforms:
            platforms.append(platform)
    if not platforms:
        raise ValueError(f"No platforms found in '{text}'")
    return tuple(platforms)

import re
from dataclasses import dataclass

from publisher.models import GitRef, TagSet
from publisher.models.git_ref import BRANCH, TAG

SEMVER = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)
_INVALID_TAG_CHARS = re.compile(r"[^a-zA-Z0-9._-]+")
MAX_TAG_LENGTH = 128
SHA_LENGTH = 7
LATEST = "latest"


@dataclass(frozen=True)
class _Candidate:
    priority: int
    value: str


class TagService:
    """Derives image tags from version-control metadata.

    Mirrors the tag rules the images have always been published with:
    semver version and major on release tags, ``edge`` on the edge branch,
    the branch name on branches, ``sha-<short sha>`` everywhere and
    ``latest`` on stable releases.
    """

    def __init__(self, edge_branch: str = "master"):
        self.edge_branch: str = edge_branch

    def compute(self, git_ref: GitRef, images: list[str]) -> TagSet:
        candidates: list[_Candidate] = []
        stable_release = False

        if git_ref.kind == TAG and (match := SEMVER.match(git_ref.name)):
            version = f"{match['major']}.{match['minor']}.{match['patch']}"
            if match["prerelease"]:
                version = f"{version}-{match['prerelease']}"
            candidates.append(_Candidate(900, version))
            # partial versions are never published for pre-releases
            if not match["prerelease"]:
                candidates.append(_Candidate(900, match["major"]))
                stable_release = True

        if git_ref.kind == BRANCH:
            if git_ref.name == self.edge_branch:
                candidates.append(_Candidate(700, "edge"))
            candidates.append(_Candidate(600, sanitize_tag(git_ref.name)))

        candidates.append(_Candidate(100, f"sha-{git_ref.sha[:SHA_LENGTH]}"))

        ordered = sorted(candidates, key=lambda c: -c.priority)
        values = list(dict.fromkeys(c.value for c in ordered if c.value))
        if stable_release and LATEST not in values:
            values.append(LATEST)

        return TagSet(
            images=list(images),
            tags=[f"{image}:{value}" for image in images for value in values],
            version=values[0] if values else None,
        )


def sanitize_tag(value: str) -> str:
    return _INVALID_TAG_CHARS.sub("-", value)[:MAX_TAG_LENGTH]

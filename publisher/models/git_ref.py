import re

from pydantic.dataclasses import dataclass

BRANCH = "branch"
TAG = "tag"
PULL_REQUEST = "pull_request"
OTHER = "other"

_PULL_REF = re.compile(r"^refs/pull/(\d+)/")


@dataclass(frozen=True)
class GitRef:
    kind: str
    name: str
    sha: str

    @classmethod
    def from_ref(cls, ref: str, sha: str) -> "GitRef":
        if not sha:
            raise ValueError(f"Missing commit sha for ref '{ref}'")
        if ref.startswith("refs/heads/"):
            return cls(BRANCH, ref.removeprefix("refs/heads/"), sha)
        if ref.startswith("refs/tags/"):
            return cls(TAG, ref.removeprefix("refs/tags/"), sha)
        if match := _PULL_REF.match(ref):
            return cls(PULL_REQUEST, match.group(1), sha)
        return cls(OTHER, ref, sha)

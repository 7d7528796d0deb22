import os

from pydantic.dataclasses import dataclass

DEFAULT_DIGESTS_DIR = "/tmp/digests"
DEFAULT_IMAGES_FILE = "images.yaml"
DEFAULT_SERVER_URL = "https://github.com"
DEFAULT_EDGE_BRANCH = "master"


@dataclass(frozen=True)
class Settings:
    dockerhub_token: str | None = None
    dockerhub_username: str | None = None
    dockerhub_namespace: str | None = None
    ghcr_token: str | None = None
    repository_owner: str | None = None
    repository: str | None = None
    server_url: str = DEFAULT_SERVER_URL
    ref: str | None = None
    sha: str | None = None
    output_file: str | None = None
    env_file: str | None = None
    digests_dir: str = DEFAULT_DIGESTS_DIR
    images_file: str = DEFAULT_IMAGES_FILE
    edge_branch: str = DEFAULT_EDGE_BRANCH

    @classmethod
    def from_env(cls) -> "Settings":
        env = os.environ
        repository = env.get("GITHUB_REPOSITORY") or None
        owner = env.get("GITHUB_REPOSITORY_OWNER") or (repository.split("/")[0] if repository else None)
        username = env.get("DOCKERHUB_USERNAME") or None
        return cls(
            dockerhub_token=env.get("DOCKERHUB_TOKEN") or None,
            dockerhub_username=username,
            dockerhub_namespace=env.get("DOCKERHUB_NAMESPACE") or username,
            ghcr_token=env.get("GHCR_TOKEN") or None,
            repository_owner=owner,
            repository=repository,
            server_url=env.get("GITHUB_SERVER_URL") or DEFAULT_SERVER_URL,
            ref=env.get("GITHUB_REF") or None,
            sha=env.get("GITHUB_SHA") or None,
            output_file=env.get("GITHUB_OUTPUT") or None,
            env_file=env.get("GITHUB_ENV") or None,
            digests_dir=env.get("DIGESTS_DIR") or DEFAULT_DIGESTS_DIR,
            images_file=env.get("IMAGES_FILE") or DEFAULT_IMAGES_FILE,
            edge_branch=env.get("EDGE_BRANCH") or DEFAULT_EDGE_BRANCH,
        )

    @property
    def image_source(self) -> str | None:
        if not self.repository:
            return None
        return f"{self.server_url.rstrip('/')}/{self.repository}"

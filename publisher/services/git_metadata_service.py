import logging

from github import UnknownObjectException

from publisher.clients.git_client import GitClient
from publisher.clients.github_client import GitHubClient
from publisher.models import GitRef, Settings
from publisher.models.git_ref import BRANCH, OTHER, TAG
from publisher.utils.logging import setup_logger


class GitMetadataService:
    def __init__(self, settings: Settings):
        self.settings: Settings = settings
        self.git: GitClient = GitClient()
        self.logger: logging.Logger = setup_logger("GitMetadataService")

    def resolve(self, ref: str | None = None) -> GitRef:
        if ref:
            return self.resolve_remote(ref)
        if self.settings.ref and self.settings.sha:
            return GitRef.from_ref(self.settings.ref, self.settings.sha)
        return self.resolve_local()

    def resolve_remote(self, ref: str) -> GitRef:
        if not self.settings.repository:
            raise EnvironmentError("GITHUB_REPOSITORY is required to resolve a ref remotely")
        gh_repo = GitHubClient().get_repo(self.settings.repository)
        for kind, prefix in ((BRANCH, "heads"), (TAG, "tags")):
            try:
                git_ref = gh_repo.get_git_ref(f"{prefix}/{ref}")
            except UnknownObjectException:
                continue
            sha = git_ref.object.sha
            # annotated tags point to a tag object, not to the commit
            if git_ref.object.type == "tag":
                sha = gh_repo.get_git_tag(sha).object.sha
            self.logger.info(f"Resolved {kind} {ref} to {sha} in {self.settings.repository}")
            return GitRef(kind, ref, sha)
        raise ValueError(f"Ref {ref} not found in {self.settings.repository}")

    def resolve_local(self) -> GitRef:
        sha = self.git.head_sha()
        if tag := self.git.exact_tag():
            return GitRef(TAG, tag, sha)
        if branch := self.git.current_branch():
            return GitRef(BRANCH, branch, sha)
        return GitRef(OTHER, "HEAD", sha)

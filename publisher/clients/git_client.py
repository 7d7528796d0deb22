import subprocess
import logging

logger = logging.getLogger(__name__)


class GitClient:
    def __init__(self, cwd: str | None = None):
        self.cwd: str | None = cwd

    def head_sha(self) -> str:
        return self._git("rev-parse", "HEAD")

    def exact_tag(self) -> str | None:
        try:
            return self._git("describe", "--tags", "--exact-match", "HEAD") or None
        except RuntimeError:
            return None

    def current_branch(self) -> str | None:
        branch = self._git("rev-parse", "--abbrev-ref", "HEAD")
        # detached checkouts report HEAD
        return None if branch == "HEAD" else branch

    def _git(self, *args: str) -> str:
        result = subprocess.run(["git", *args], check=False, capture_output=True, text=True, cwd=self.cwd)
        if result.returncode != 0:
            logger.debug(f"git {args[0]} failed: {result.stderr.strip()}")
            raise RuntimeError(f"git {args[0]} failed with code {result.returncode}")
        return result.stdout.strip()

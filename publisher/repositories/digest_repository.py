import glob
import os
import re
import shutil
from pathlib import Path

from publisher.models import DigestArtifact, Platform
from publisher.models.digest_artifact import artifact_name

# operating systems a platform pair may start with, used to tell
# "digests-base-linux-amd64" apart from "digests-base-app-linux-amd64"
KNOWN_OS = ("linux", "windows", "darwin", "freebsd", "netbsd", "openbsd", "illumos", "solaris", "wasip1")
_PAIR = re.compile(rf"^(?:{'|'.join(KNOWN_OS)})-[a-z0-9]+(?:-[a-z0-9]+)?$")


class DigestRepository:
    """Digest artifacts on disk, one directory per image and platform.

    ``<root>/digests-<image>-<platform pair>/<hex digest>`` is the rendezvous
    between the per-platform builds and the merge.
    """

    def __init__(self, root_dir: str):
        self.root_dir: str = root_dir

    def save(self, artifact: DigestArtifact) -> str:
        directory = Path(self.root_dir) / artifact.artifact_name
        # an artifact is overwritten by a rebuild of the same platform
        if directory.exists():
            shutil.rmtree(directory)
        directory.mkdir(parents=True)
        path = directory / artifact.filename
        path.touch()
        return str(path)

    def find_all(self, image_name: str, platforms: tuple[Platform, ...] | None = None) -> list[DigestArtifact]:
        if platforms is not None:
            pairs = [p.pair for p in platforms]
        else:
            prefix = artifact_name(image_name, "")
            pattern = os.path.join(glob.escape(self.root_dir), f"{glob.escape(prefix)}*")
            pairs = [os.path.basename(d).removeprefix(prefix) for d in sorted(glob.glob(pattern))]
            pairs = [p for p in pairs if _PAIR.match(p)]

        artifacts = []
        for pair in pairs:
            directory = os.path.join(self.root_dir, artifact_name(image_name, pair))
            if not os.path.isdir(directory):
                continue
            files = sorted(os.listdir(directory))
            if len(files) != 1:
                raise ValueError(f"Expected exactly one digest in {directory}, found {len(files)}")
            try:
                artifacts.append(DigestArtifact.from_filename(image_name, pair, files[0]))
            except Exception as e:
                raise ValueError(f"Invalid digest artifact in {directory}: {e}") from e
        return artifacts

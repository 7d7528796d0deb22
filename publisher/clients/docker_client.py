import json
import os
import shlex
import subprocess
import logging
import tempfile

from publisher.models import Platform, RegistryTarget

logger = logging.getLogger(__name__)


class DockerClient:
    def __init__(self, dry_run: bool = False):
        self.dry_run: bool = dry_run

    def login(self, target: RegistryTarget) -> None:
        cmd = ["docker", "login", "--username", target.username, "--password-stdin"]
        if target.registry:
            cmd.append(target.registry)
        self._run(cmd, stdin=target.token)

    def build(
        self,
        platform: Platform,
        context: str,
        dockerfile: str,
        tags: list[str],
        build_args: dict[str, str],
        cache_from: str | None = None,
        cache_to: str | None = None,
        push: bool = False,
    ) -> str | None:
        with tempfile.TemporaryDirectory() as tmp:
            metadata_file = os.path.join(tmp, "metadata.json")
            cmd = ["docker", "buildx", "build", "--platform", str(platform), "--file", dockerfile]
            for tag in tags:
                cmd += ["--tag", tag]
            for key, value in build_args.items():
                cmd += ["--build-arg", f"{key}={value}"]
            if cache_from:
                cmd += ["--cache-from", cache_from]
            if cache_to:
                cmd += ["--cache-to", cache_to]
            if push:
                cmd.append("--push")
            cmd += ["--metadata-file", metadata_file, context]

            if not self._run(cmd):
                return None
            return self._read_digest(metadata_file)

    def create_manifest(self, tags: list[str], sources: list[str]) -> None:
        cmd = ["docker", "buildx", "imagetools", "create"]
        for tag in tags:
            cmd += ["-t", tag]
        self._run(cmd + sources)

    def inspect(self, ref: str) -> str | None:
        result = self._run(["docker", "buildx", "imagetools", "inspect", ref], capture=True)
        return result.stdout if result else None

    def _read_digest(self, metadata_file: str) -> str:
        try:
            with open(metadata_file, "r") as f:
                metadata = json.load(f)
        except (OSError, ValueError) as e:
            raise RuntimeError(f"Unable to read build metadata: {e}") from e
        digest = metadata.get("containerimage.digest")
        if not digest:
            raise RuntimeError("Build metadata does not contain an image digest")
        return digest

    def _run(self, cmd: list[str], stdin: str | None = None, capture: bool = False) -> subprocess.CompletedProcess | None:
        if self.dry_run:
            print(shlex.join(cmd))
            return None
        logger.debug(f"Running {shlex.join(cmd)}")
        result = subprocess.run(cmd, check=False, input=stdin, text=True, capture_output=capture)
        if result.returncode != 0:
            logger.error(f"{cmd[0]} {cmd[1]} failed with code {result.returncode}")
            raise RuntimeError(f"Command '{shlex.join(cmd[:4])}' failed with code {result.returncode}")
        return result

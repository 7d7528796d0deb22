import json
import subprocess

import pytest
from publisher.clients.docker_client import DockerClient
from publisher.models import Platform, RegistryTarget

DIGEST = "sha256:" + "0f" * 32


class DummyResult:
    def __init__(self, returncode=0, stdout=""):
        self.returncode = returncode
        self.stdout = stdout


@pytest.fixture
def calls(monkeypatch):
    recorded = []

    def fake_run(cmd, check=False, input=None, text=True, capture_output=False):
        recorded.append({"cmd": cmd, "input": input})
        if "--metadata-file" in cmd:
            with open(cmd[cmd.index("--metadata-file") + 1], "w") as f:
                json.dump({"containerimage.digest": DIGEST}, f)
        return DummyResult(stdout="Name: ghcr.io/o/base:edge")

    monkeypatch.setattr(subprocess, "run", fake_run)
    return recorded


def test_login_dockerhub(calls):
    DockerClient().login(RegistryTarget(name="dockerhub", image="gow/base", username="gow", token="secret"))
    assert calls[0]["cmd"] == ["docker", "login", "--username", "gow", "--password-stdin"]
    assert calls[0]["input"] == "secret"


def test_login_ghcr(calls):
    DockerClient().login(RegistryTarget(name="ghcr", image="ghcr.io/o/base", username="o", token="secret", registry="ghcr.io"))
    assert calls[0]["cmd"][-1] == "ghcr.io"


def test_build_returns_digest(calls):
    digest = DockerClient().build(
        platform=Platform("linux", "arm64"),
        context="./images/base/build",
        dockerfile="./images/base/build/Dockerfile",
        tags=["ghcr.io/o/base:edge", "ghcr.io/o/base:sha-abcdef0"],
        build_args={"IMAGE_SOURCE": "https://github.com/o/gow"},
        cache_from="type=registry,ref=ghcr.io/o/base:buildcache-arm64",
        cache_to="type=registry,ref=ghcr.io/o/base:buildcache-arm64,mode=max",
        push=True,
    )
    assert digest == DIGEST
    cmd = calls[0]["cmd"]
    assert cmd[:5] == ["docker", "buildx", "build", "--platform", "linux/arm64"]
    assert cmd[-1] == "./images/base/build"
    assert ["--tag", "ghcr.io/o/base:edge"] == cmd[cmd.index("--tag"):cmd.index("--tag") + 2]
    assert "IMAGE_SOURCE=https://github.com/o/gow" in cmd
    assert "type=registry,ref=ghcr.io/o/base:buildcache-arm64,mode=max" in cmd
    assert "--push" in cmd


def test_build_without_push_or_cache(calls):
    DockerClient().build(
        platform=Platform("linux", "amd64"),
        context="./images/base/build",
        dockerfile="./images/base/build/Dockerfile",
        tags=[],
        build_args={},
    )
    cmd = calls[0]["cmd"]
    assert "--push" not in cmd
    assert "--cache-from" not in cmd
    assert "--cache-to" not in cmd


def test_build_without_digest(monkeypatch):
    monkeypatch.setattr(subprocess, "run", lambda cmd, **kwargs: DummyResult())
    with pytest.raises(RuntimeError, match="Unable to read build metadata"):
        DockerClient().build(Platform("linux", "amd64"), ".", "./Dockerfile", [], {})


def test_create_manifest(calls):
    DockerClient().create_manifest(
        ["ghcr.io/o/base:edge", "ghcr.io/o/base:master"],
        [f"ghcr.io/o/base@{DIGEST}"],
    )
    assert calls[0]["cmd"] == [
        "docker", "buildx", "imagetools", "create",
        "-t", "ghcr.io/o/base:edge", "-t", "ghcr.io/o/base:master",
        f"ghcr.io/o/base@{DIGEST}",
    ]


def test_inspect(calls):
    assert DockerClient().inspect("ghcr.io/o/base:edge") == "Name: ghcr.io/o/base:edge"


def test_command_failure(monkeypatch):
    monkeypatch.setattr(subprocess, "run", lambda cmd, **kwargs: DummyResult(returncode=1))
    with pytest.raises(RuntimeError, match="failed with code 1"):
        DockerClient().create_manifest(["gow/base:edge"], [f"gow/base@{DIGEST}"])


def test_dry_run_prints(monkeypatch, capsys):
    def fail(*args, **kwargs):
        raise AssertionError("docker must not run in dry run")

    monkeypatch.setattr(subprocess, "run", fail)
    client = DockerClient(dry_run=True)
    assert client.build(Platform("linux", "amd64"), ".", "./Dockerfile", ["gow/base:edge"], {}) is None
    client.login(RegistryTarget(name="dockerhub", image="gow/base", username="gow", token="secret"))
    out = capsys.readouterr().out
    assert "docker buildx build --platform linux/amd64" in out
    assert "secret" not in out

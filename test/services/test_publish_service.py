import os
import shutil

import pytest
from unittest.mock import MagicMock, patch

from publisher.models import DigestArtifact, GitRef, Platform, Settings
from publisher.services.publish_service import PublishService

ASSETS_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "assets")
DIGEST = "sha256:" + "d" * 64


@pytest.fixture
def settings(tmp_path):
    images_file = tmp_path / "images.yaml"
    shutil.copy(os.path.join(ASSETS_DIR, "images.yaml"), images_file)
    return Settings(
        ghcr_token="ghcr-token",
        repository_owner="games-on-whales",
        images_file=str(images_file),
        digests_dir=str(tmp_path / "digests"),
    )


@pytest.fixture
def mock_build():
    with patch("publisher.services.publish_service.PlatformBuildService") as p:
        p.return_value.run.return_value = DigestArtifact("base", "linux-amd64", DIGEST)
        yield p


@pytest.fixture
def mock_merge():
    with patch("publisher.services.publish_service.ManifestMergeService") as p:
        yield p


def make_service(settings, **kwargs):
    with patch("publisher.services.publish_service.DockerClient"), \
         patch("publisher.services.publish_service.GitMetadataService"):
        svc = PublishService(settings, **kwargs)
    svc.logger = MagicMock()
    svc.git_metadata.resolve.return_value = GitRef("branch", "master", "abcdef0123")
    return svc


def test_publish_single_image(settings, mock_build, mock_merge):
    svc = make_service(settings, image_name="base")
    svc.run()

    built = sorted(str(c.args[1]) for c in mock_build.call_args_list)
    assert built == ["linux/amd64", "linux/arm64"]
    for c in mock_build.call_args_list:
        assert c.kwargs["login"] is False
        assert c.kwargs["tag_set"].tags[0] == "ghcr.io/games-on-whales/base:edge"

    svc.docker.login.assert_called_once()
    mock_merge.assert_called_once()
    request = mock_merge.call_args.args[0]
    assert request.image_name == "base"
    assert request.platforms == (Platform("linux", "amd64"), Platform("linux", "arm64"))
    assert mock_merge.call_args.kwargs["tag_set"].version == "edge"
    mock_merge.return_value.run.assert_called_once()


def test_publish_all_images(settings, mock_build, mock_merge):
    svc = make_service(settings)
    svc.run()
    merged = [c.args[0].image_name for c in mock_merge.call_args_list]
    assert merged == ["base", "base-app", "wolf"]
    assert mock_build.call_count == 5


def test_failed_platform_skips_merge(settings, mock_build, mock_merge):
    mock_build.return_value.run.side_effect = RuntimeError("docker failed")
    svc = make_service(settings, image_name="base")
    with pytest.raises(Exception, match="Failed to build platform of base: docker failed"):
        svc.run()
    assert mock_build.return_value.run.call_count == 2
    assert not mock_merge.called


def test_dry_run_skips_merge(settings, mock_build, mock_merge):
    mock_build.return_value.run.return_value = None
    svc = make_service(settings, image_name="base", dry_run=True)
    svc.run()
    assert mock_build.call_count == 2
    assert not mock_merge.called


def test_unknown_image(settings, mock_build, mock_merge):
    svc = make_service(settings, image_name="nope")
    with pytest.raises(Exception, match="Image nope is not defined"):
        svc.run()
    assert not mock_build.called


def test_invalid_image_definition(settings, mock_build, mock_merge, tmp_path):
    images_file = tmp_path / "images.yaml"
    images_file.write_text("images:\n  - name: wolf\n    docker_path: apps\n")
    svc = make_service(settings, image_name="wolf")
    with pytest.raises(ValueError, match="base_image input is empty but required"):
        svc.run()
    assert not mock_build.called


def test_no_images_defined(tmp_path, mock_build, mock_merge):
    svc = make_service(Settings(images_file=str(tmp_path / "missing.yaml")))
    with pytest.raises(Exception, match="No images defined"):
        svc.run()

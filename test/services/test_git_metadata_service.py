import pytest
from unittest.mock import MagicMock, patch
from github import UnknownObjectException

from publisher.models import GitRef, Settings
from publisher.services.git_metadata_service import GitMetadataService


@pytest.fixture
def mock_github():
    with patch("publisher.services.git_metadata_service.GitHubClient") as p:
        yield p.return_value


def make_service(**settings):
    svc = GitMetadataService(Settings(**settings))
    svc.logger = MagicMock()
    svc.git = MagicMock()
    return svc


def test_resolve_from_environment():
    svc = make_service(ref="refs/tags/v1.0.0", sha="abc")
    assert svc.resolve() == GitRef("tag", "v1.0.0", "abc")
    assert not svc.git.head_sha.called


def test_resolve_local_tag():
    svc = make_service()
    svc.git.head_sha.return_value = "abc"
    svc.git.exact_tag.return_value = "v1.0.0"
    assert svc.resolve() == GitRef("tag", "v1.0.0", "abc")


def test_resolve_local_branch():
    svc = make_service()
    svc.git.head_sha.return_value = "abc"
    svc.git.exact_tag.return_value = None
    svc.git.current_branch.return_value = "master"
    assert svc.resolve() == GitRef("branch", "master", "abc")


def test_resolve_local_detached():
    svc = make_service()
    svc.git.head_sha.return_value = "abc"
    svc.git.exact_tag.return_value = None
    svc.git.current_branch.return_value = None
    assert svc.resolve() == GitRef("other", "HEAD", "abc")


def test_resolve_remote_branch(mock_github):
    svc = make_service(repository="games-on-whales/gow", ref="refs/heads/master", sha="ignored")
    gh_repo = mock_github.get_repo.return_value
    gh_repo.get_git_ref.return_value = MagicMock(object=MagicMock(sha="def", type="commit"))
    assert svc.resolve("dev") == GitRef("branch", "dev", "def")
    mock_github.get_repo.assert_called_with("games-on-whales/gow")
    gh_repo.get_git_ref.assert_called_with("heads/dev")


def test_resolve_remote_annotated_tag(mock_github):
    svc = make_service(repository="games-on-whales/gow")
    gh_repo = mock_github.get_repo.return_value

    def get_git_ref(ref):
        if ref.startswith("heads/"):
            raise UnknownObjectException(404)
        return MagicMock(object=MagicMock(sha="tagobject", type="tag"))

    gh_repo.get_git_ref.side_effect = get_git_ref
    gh_repo.get_git_tag.return_value = MagicMock(object=MagicMock(sha="commit"))
    assert svc.resolve("v1.2.3") == GitRef("tag", "v1.2.3", "commit")
    gh_repo.get_git_tag.assert_called_with("tagobject")


def test_resolve_remote_unknown_ref(mock_github):
    svc = make_service(repository="games-on-whales/gow")
    mock_github.get_repo.return_value.get_git_ref.side_effect = UnknownObjectException(404)
    with pytest.raises(ValueError, match="Ref nope not found in games-on-whales/gow"):
        svc.resolve("nope")


def test_resolve_remote_requires_repository():
    with pytest.raises(EnvironmentError, match="GITHUB_REPOSITORY is required"):
        make_service().resolve("master")

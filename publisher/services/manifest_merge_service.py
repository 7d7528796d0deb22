import logging
from typing_extensions import override

from publisher.clients.docker_client import DockerClient
from publisher.clients.image_registry_client import ImageRegistryClient, split_image
from publisher.models import BuildRequest, DigestArtifact, RegistryTarget, Settings, TagSet
from publisher.repositories import DigestRepository
from publisher.services.git_metadata_service import GitMetadataService
from publisher.services.reference_service import resolve_references
from publisher.services.service import Service
from publisher.services.tag_service import TagService
from publisher.utils.logging import setup_logger


class ManifestMergeService(Service):
    """Composes the per-platform digests of an image into one manifest list per registry.

    When ``request.platforms`` is empty the expected platform set is unknown
    and every digest artifact found for the image is merged; otherwise each
    expected platform must have left exactly one digest behind.
    """

    def __init__(
        self,
        request: BuildRequest,
        settings: Settings,
        dry_run: bool = False,
        ref: str | None = None,
        tag_set: TagSet | None = None,
    ):
        self.request: BuildRequest = request
        self.settings: Settings = settings
        self.dry_run: bool = dry_run
        self.ref: str | None = ref
        self.tag_set: TagSet | None = tag_set
        self.docker: DockerClient = DockerClient(dry_run)
        self.digests: DigestRepository = DigestRepository(settings.digests_dir)
        self.git_metadata: GitMetadataService = GitMetadataService(settings)
        self.tags: TagService = TagService(settings.edge_branch)
        self.logger: logging.Logger = setup_logger("ManifestMergeService")

    @override
    def run(self) -> None:
        image_name = self.request.image_name
        if not image_name:
            raise ValueError("image_name input is empty but required")
        references = resolve_references(self.settings, image_name)
        if not references.targets:
            self.logger.warning(f"No registry credentials found, no manifest list created for {image_name}")
            return

        artifacts = self.collect_digests()
        tag_set = self.tag_set or self.tags.compute(self.git_metadata.resolve(self.ref), references.images)

        for target in references.targets:
            tags = tag_set.for_image(target.image)
            if not tags:
                raise Exception(f"No tags computed for {target.image}")
            self.docker.login(target)
            self.logger.info(f"Creating manifest list {', '.join(tags)} from {len(artifacts)} digests")
            try:
                self.docker.create_manifest(tags, [a.source_ref(target.image) for a in artifacts])
            except Exception as e:
                raise Exception(f"Failed to create manifest list for {target.image}: {e}") from e

            if self.dry_run:
                self.logger.info(f"Dry run mode. manifest list of {target.image} has not been verified")
                continue
            self.verify(target, tag_set.version or tags[0].rsplit(":", 1)[1], artifacts)

    def collect_digests(self) -> list[DigestArtifact]:
        expected = self.request.platforms or None
        artifacts = self.digests.find_all(self.request.image_name, expected)
        if not artifacts:
            raise Exception(f"No digest artifacts found for {self.request.image_name} in {self.settings.digests_dir}")
        if expected:
            found = {a.platform_pair for a in artifacts}
            missing = [str(p) for p in expected if p.pair not in found]
            if missing:
                raise Exception(f"Refusing partial merge of {self.request.image_name}, missing digests for {', '.join(missing)}")
        return artifacts

    def verify(self, target: RegistryTarget, version: str, artifacts: list[DigestArtifact]) -> None:
        registry, _ = split_image(target.image)
        client = ImageRegistryClient(credentials={registry: (target.username, target.token)})
        try:
            platforms = client.platforms(target.image, version)
            digest = client.resolve_digest(target.image, version)
        except Exception as e:
            raise Exception(f"Failed to inspect {target.image}:{version}: {e}") from e
        found = {p.replace("/", "-") for p in platforms}
        missing = [a.platform_pair for a in artifacts if a.platform_pair not in found]
        if missing:
            raise Exception(f"Manifest list {target.image}:{version} is missing {', '.join(missing)}")
        self.logger.info(f"Pushed {target.image}:{version} as {digest}: {', '.join(platforms)}")
        self.logger.info(self.docker.inspect(f"{target.image}:{version}"))

import logging
from concurrent.futures import ThreadPoolExecutor
from typing_extensions import override

from publisher.clients.docker_client import DockerClient
from publisher.models import BuildRequest, DigestArtifact, GitRef, ImageDefinition, Settings
from publisher.repositories import ImageDefinitionRepository
from publisher.services.git_metadata_service import GitMetadataService
from publisher.services.manifest_merge_service import ManifestMergeService
from publisher.services.platform_build_service import PlatformBuildService
from publisher.services.reference_service import resolve_references
from publisher.services.service import Service
from publisher.services.tag_service import TagService
from publisher.utils.logging import setup_logger


class PublishService(Service):
    """Runs the whole publish locally: per-platform builds in parallel, then the merge."""

    def __init__(
        self,
        settings: Settings,
        image_name: str | None = None,
        dry_run: bool = False,
        ref: str | None = None,
        max_workers: int = 8,
    ):
        self.settings: Settings = settings
        self.image_name: str | None = image_name
        self.dry_run: bool = dry_run
        self.ref: str | None = ref
        self.max_workers: int = max_workers
        self.images_repo: ImageDefinitionRepository = ImageDefinitionRepository(settings.images_file)
        self.docker: DockerClient = DockerClient(dry_run)
        self.git_metadata: GitMetadataService = GitMetadataService(settings)
        self.tags: TagService = TagService(settings.edge_branch)
        self.logger: logging.Logger = setup_logger("PublishService")

    @override
    def run(self) -> None:
        definitions = self.select_images()
        git_ref = self.git_metadata.resolve(self.ref)
        self.logger.info(f"Publishing {', '.join(d.name for d in definitions)} at {git_ref.kind} {git_ref.name} ({git_ref.sha})")
        for definition in definitions:
            self.publish(definition.to_request(), git_ref)

    def select_images(self) -> list[ImageDefinition]:
        definitions = self.images_repo.find_all()
        if self.image_name:
            definitions = [d for d in definitions if d.name == self.image_name]
            if not definitions:
                raise Exception(f"Image {self.image_name} is not defined in {self.settings.images_file}")
        if not definitions:
            raise Exception(f"No images defined in {self.settings.images_file}")
        return definitions

    def publish(self, request: BuildRequest, git_ref: GitRef) -> None:
        request.validate()
        references = resolve_references(self.settings, request.image_name)
        tag_set = self.tags.compute(git_ref, references.images)
        for target in references.targets:
            self.docker.login(target)

        artifacts: list[DigestArtifact] = []
        errors: list[Exception] = []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(self.build_platform, request, platform, tag_set)
                for platform in request.platforms
            ]
            # every build finishes before anything is merged
            for future in futures:
                try:
                    artifact = future.result()
                    if artifact:
                        artifacts.append(artifact)
                except Exception as e:
                    errors.append(e)

        if errors:
            raise Exception(f"Failed to build platform of {request.image_name}: {errors[0]}") from errors[0]

        if self.dry_run:
            self.logger.info(f"Dry run mode. manifest list of {request.image_name} has not been created")
            return
        self.logger.info(f"Built {len(artifacts)} platforms of {request.image_name}, merging")
        ManifestMergeService(request, self.settings, tag_set=tag_set).run()

    def build_platform(self, request, platform, tag_set):
        service = PlatformBuildService(request, platform, self.settings, self.dry_run, tag_set=tag_set, login=False)
        return service.run()

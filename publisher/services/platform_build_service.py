import logging
from typing_extensions import override

from publisher.clients.docker_client import DockerClient
from publisher.models import BuildRequest, DigestArtifact, ImageReferences, Platform, Settings, TagSet
from publisher.repositories import DigestRepository
from publisher.services.git_metadata_service import GitMetadataService
from publisher.services.reference_service import resolve_references
from publisher.services.service import Service
from publisher.services.tag_service import TagService
from publisher.utils.logging import setup_logger
from publisher.utils.step_output import StepOutput


class PlatformBuildService(Service):
    """Builds one platform of an image and leaves its digest artifact behind."""

    def __init__(
        self,
        request: BuildRequest,
        platform: Platform,
        settings: Settings,
        dry_run: bool = False,
        ref: str | None = None,
        tag_set: TagSet | None = None,
        login: bool = True,
    ):
        self.request: BuildRequest = request
        self.platform: Platform = platform
        self.settings: Settings = settings
        self.dry_run: bool = dry_run
        self.ref: str | None = ref
        self.tag_set: TagSet | None = tag_set
        self.login: bool = login
        self.docker: DockerClient = DockerClient(dry_run)
        self.digests: DigestRepository = DigestRepository(settings.digests_dir)
        self.git_metadata: GitMetadataService = GitMetadataService(settings)
        self.tags: TagService = TagService(settings.edge_branch)
        self.outputs: StepOutput = StepOutput(settings.output_file, settings.env_file)
        self.logger: logging.Logger = setup_logger("PlatformBuildService")

    @override
    def run(self) -> DigestArtifact | None:
        self.request.validate()
        references = resolve_references(self.settings, self.request.image_name)
        tag_set = self.tag_set or self.tags.compute(self.git_metadata.resolve(self.ref), references.images)

        if not references.push:
            self.logger.warning(f"No registry credentials found, {self.request.image_name} will not be pushed")
        if self.login:
            for target in references.targets:
                self.docker.login(target)

        self.logger.info(f"Building {self.request.image_name} for {self.platform}")
        try:
            digest = self.docker.build(
                platform=self.platform,
                context=self.request.context,
                dockerfile=self.request.dockerfile,
                tags=tag_set.tags,
                build_args=self.build_args(),
                cache_from=references.cache_from(self.platform),
                cache_to=references.cache_to(self.platform),
                push=references.push,
            )
        except Exception as e:
            raise Exception(f"Failed to build {self.request.image_name} for {self.platform}: {e}") from e

        self.export_outputs(references, tag_set)
        if digest is None:
            self.logger.info(f"Dry run mode. digest of {self.request.image_name} for {self.platform} has not been exported")
            return None

        self.logger.info(f"{self.request.image_name} > {digest}")
        artifact = DigestArtifact(self.request.image_name, self.platform.pair, digest)
        path = self.digests.save(artifact)
        self.logger.info(f"Exported digest artifact {artifact.artifact_name} to {path}")
        return artifact

    def build_args(self) -> dict[str, str]:
        args = {}
        if self.settings.image_source:
            args["IMAGE_SOURCE"] = self.settings.image_source
        if self.request.base_image:
            args["BASE_IMAGE"] = self.request.base_image
        if self.request.base_app_image:
            args["BASE_APP_IMAGE"] = self.request.base_app_image
        return args

    def export_outputs(self, references: ImageReferences, tag_set: TagSet) -> None:
        self.outputs.set_output("image_tag", tag_set.image_tag or "")
        self.outputs.set_output("images", ",".join(references.images))
        self.outputs.set_output("version", tag_set.version or "")
        self.outputs.set_env("PLATFORM_PAIR", self.platform.pair)

from publisher.models import ImageReferences, RegistryTarget, Settings
from publisher.models.registry_target import DOCKERHUB, GHCR, GHCR_REGISTRY


def resolve_references(settings: Settings, image_name: str) -> ImageReferences:
    """Destination images for which publish credentials are available."""
    targets: list[RegistryTarget] = []

    if settings.dockerhub_token:
        if not settings.dockerhub_username:
            raise EnvironmentError("DOCKERHUB_USERNAME is required when DOCKERHUB_TOKEN is set")
        targets.append(RegistryTarget(
            name=DOCKERHUB,
            image=f"{settings.dockerhub_namespace or settings.dockerhub_username}/{image_name}".lower(),
            username=settings.dockerhub_username,
            token=settings.dockerhub_token,
        ))

    if settings.ghcr_token:
        if not settings.repository_owner:
            raise EnvironmentError("GITHUB_REPOSITORY_OWNER is required when GHCR_TOKEN is set")
        targets.append(RegistryTarget(
            name=GHCR,
            image=f"{GHCR_REGISTRY}/{settings.repository_owner}/{image_name}".lower(),
            username=settings.repository_owner,
            token=settings.ghcr_token,
            registry=GHCR_REGISTRY,
        ))

    return ImageReferences(targets=tuple(targets))

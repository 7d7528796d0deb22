from .build_request import BuildRequest
from .digest_artifact import DigestArtifact
from .git_ref import GitRef
from .image_definition import ImageDefinition
from .image_references import ImageReferences
from .platform import Platform, parse_platforms
from .registry_target import RegistryTarget
from .settings import Settings
from .tag_set import TagSet
from .wrappers import ImagesFile

__all__ = [
    "BuildRequest",
    "DigestArtifact",
    "GitRef",
    "ImageDefinition",
    "ImageReferences",
    "ImagesFile",
    "Platform",
    "RegistryTarget",
    "Settings",
    "TagSet",
    "parse_platforms",
]

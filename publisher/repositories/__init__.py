from .digest_repository import DigestRepository
from .image_definition_repository import ImageDefinitionRepository

__all__ = [
    'DigestRepository',
    'ImageDefinitionRepository'
]

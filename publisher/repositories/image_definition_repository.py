import os
from ruamel.yaml import YAML
from publisher.models import ImageDefinition, ImagesFile
from publisher.utils.yaml_loader import get_yaml_instance


class ImageDefinitionRepository:
    def __init__(self, file_path: str):
        self.file_path: str = file_path
        self.yaml: YAML = get_yaml_instance()

    def find_all(self) -> list[ImageDefinition]:
        if not os.path.isfile(self.file_path):
            return []
        with open(self.file_path, "r") as f:
            data = self.yaml.load(f)
            try:
                parsed = ImagesFile(**data)
                return parsed.images
            except Exception as e:
                raise ValueError(f"Invalid images.yaml structure: {e}") from e

    def find_by_name(self, name: str) -> ImageDefinition | None:
        return next((i for i in self.find_all() if i.name == name), None)

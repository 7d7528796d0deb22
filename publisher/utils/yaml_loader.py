from ruamel.yaml import YAML

def get_yaml_instance() -> YAML:
    # catalogues are only read, plain dicts and lists are enough for pydantic
    yaml = YAML(typ="safe", pure=True)
    yaml.allow_duplicate_keys = False
    return yaml

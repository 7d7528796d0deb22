import json
import logging
from typing_extensions import override

from publisher.models import Settings, parse_platforms
from publisher.services.service import Service
from publisher.utils.logging import setup_logger
from publisher.utils.step_output import StepOutput


class PreparePlatformsService(Service):
    def __init__(self, platforms: str | None, settings: Settings):
        self.platforms: str | None = platforms
        self.outputs: StepOutput = StepOutput(settings.output_file, settings.env_file)
        self.logger: logging.Logger = setup_logger("PreparePlatformsService")

    @override
    def run(self) -> list[str]:
        parsed = parse_platforms(self.platforms)
        platforms = [str(p) for p in parsed]
        matrix = {"include": [{"platform": str(p), "runner": p.runner} for p in parsed]}
        self.outputs.set_output("platforms", json.dumps(platforms, separators=(",", ":")))
        self.outputs.set_output("matrix", json.dumps(matrix, separators=(",", ":")))
        self.logger.info(f"Prepared build matrix for {', '.join(platforms)}")
        return platforms

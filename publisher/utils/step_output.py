import logging

logger = logging.getLogger(__name__)


class StepOutput:
    """Writes CI step outputs and environment entries.

    Values are appended as ``key=value`` lines to the files named by
    ``GITHUB_OUTPUT`` / ``GITHUB_ENV``. Outside of a runner those files are
    unset and the lines are printed instead, so the scripts stay usable from
    a shell.
    """

    def __init__(self, output_file: str | None = None, env_file: str | None = None):
        self.output_file: str | None = output_file
        self.env_file: str | None = env_file

    def set_output(self, key: str, value: str) -> None:
        self._append(self.output_file, key, value)

    def set_env(self, key: str, value: str) -> None:
        self._append(self.env_file, key, value)

    def _append(self, path: str | None, key: str, value: str) -> None:
        if "\n" in value:
            raise ValueError(f"Multiline value for {key} is not supported")
        line = f"{key}={value}"
        if not path:
            print(line)
            return
        with open(path, "a") as f:
            f.write(line + "\n")
        logger.debug(f"Wrote {line} to {path}")

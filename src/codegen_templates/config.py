import os
from dataclasses import dataclass

_DEFAULT_ENCODING = "utf-8"
_DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    encoding: str
    log_level: str


def get_settings() -> Settings:
    return Settings(
        encoding=os.getenv("CODEGEN_TEMPLATES_ENCODING", _DEFAULT_ENCODING),
        log_level=os.getenv("CODEGEN_TEMPLATES_LOG_LEVEL", _DEFAULT_LOG_LEVEL).upper(),
    )

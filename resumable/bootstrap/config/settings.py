from typing import Annotated, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource

from resumable.bootstrap.config.loader import get_configfile


class StreamSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RESUMABLE_",
        extra="ignore"
    )

    chunk_size: Annotated[
        int,
        Field(
            description=(
                "Maximum size in bytes of a single 'data' notification emitted by\n"
                "file and socket sources."
            ),
            default=64 * 1024,
            gt=0
        )
    ]

    high_water_mark: Annotated[
        int,
        Field(
            description=(
                "Buffered size in bytes at which a sink reports saturation.\n"
                "Once reached, write() returns False and a piped ResumableStream\n"
                "stays paused until the sink emits 'drain'."
            ),
            default=16 * 1024,
            gt=0
        )
    ]

    log_level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        Field(
            description=(
                "Logging verbosity.\n"
                "DEBUG    → pipe lifecycle and discarded notifications.\n"
                "INFO     → standard operational logs (default).\n"
                "WARNING  → unmatched resume() calls, sink failures.\n"
                "ERROR    → source errors while piping."
            ),
            default="INFO"
        )
    ]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: tuple[PydanticBaseSettingsSource, ...] = (init_settings, env_settings)

        configfile = get_configfile()
        if configfile is not None:
            sources += (YamlConfigSettingsSource(settings_cls, yaml_file=configfile),)

        return sources

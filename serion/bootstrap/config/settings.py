from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource

from serion.bootstrap.config.loader import get_configfile


class RegistrySettings(BaseModel):
    schema_file: Annotated[
        Path,
        Field(
            description=(
                "Path to the YAML schema file listing every registered type.\n"
                "Each entry declares a type_id, a version and its ordered fields.\n"
                "The same schema (or a version-compatible one) must be used to\n"
                "encode and to decode a stream, since field layout is never\n"
                "written to the stream itself."
            )
        )
    ]

    @field_validator("schema_file")
    @classmethod
    def validate_path(cls, v: Path) -> Path:
        if not v.is_file():
            raise ValueError(f"Schema file {v} does not exist.")
        return v


class StoreSettings(BaseModel):
    backend: Annotated[
        Literal["file", "lmdb"],
        Field(
            description=(
                "Blob store used by serionctl.\n"
                "file → one '<name>.ser' file per blob inside data_dir.\n"
                "lmdb → a single LMDB environment inside data_dir, with\n"
                "       per-blob checksums and schema fingerprints."
            ),
            default="file"
        )
    ]

    data_dir: Annotated[
        Path,
        Field(
            description=(
                "Directory where encoded blobs are stored.\n"
                "It must exist or be creatable, and be writable."
            )
        )
    ]

    map_size: Annotated[
        int,
        Field(
            description="Maximum size of the LMDB environment, in bytes.",
            default=1 << 30,
            gt=0
        )
    ]


class CodecSettings(BaseModel):
    max_stream_size: Annotated[
        int,
        Field(
            description=(
                "Largest stream the decoder accepts, in bytes.\n"
                "Protects against corrupted length prefixes and memory exhaustion."
            ),
            default=64 * 1024 * 1024,
            gt=0
        )
    ]


class SerionConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SERION_",
        env_nested_delimiter="__",
        extra="ignore"
    )

    registry: Annotated[
        RegistrySettings,
        Field(description="Schema registry configuration.")
    ]

    store: Annotated[
        StoreSettings,
        Field(description="Blob store configuration.")
    ]

    codec: Annotated[
        CodecSettings,
        Field(
            description="Encoder and decoder limits.",
            default_factory=CodecSettings
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
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=get_configfile()),
        )

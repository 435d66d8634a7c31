from os import getenv, path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from catalog.exceptions import ConfigurationError


CONFIG_FILE = './config.json'
CONFIG_ENV_VAR = 'CATALOG_CONFIG'

FATAL = 'fatal'
WARN = 'warn'


class AwsSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_key_id: str = Field(alias='accessKeyId')
    secret_access_key_id: str = Field(alias='secretAccessKeyId')
    region: str
    endpoint_url: str | None = Field(default=None, alias='endpointUrl')
    connect_timeout: float = Field(default=5, alias='connectTimeout', gt=0)
    read_timeout: float = Field(default=10, alias='readTimeout', gt=0)


class RouterSettings(BaseModel):
    # listen address, ":<port>" or "<host>:<port>"
    port: str = ':8080'

    @field_validator('port')
    @classmethod
    def check_address(cls, value: str) -> str:
        _, separator, port = value.rpartition(':')
        if not separator or not port.isdigit() or not 0 < int(port) < 65536:
            raise ValueError(f'listen address should look like ":<port>", got {value!r}')
        return value

    @property
    def host(self) -> str:
        return self.port.rpartition(':')[0] or '0.0.0.0'

    @property
    def port_number(self) -> int:
        return int(self.port.rpartition(':')[2])


class TableSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    read_capacity: int = Field(default=10, alias='readCapacity', gt=0)
    write_capacity: int = Field(default=10, alias='writeCapacity', gt=0)
    on_create_failure: Literal['fatal', 'warn'] = Field(default=FATAL, alias='onCreateFailure')
    wait_for_table: bool = Field(default=True, alias='waitForTable')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix='CATALOG_',
        env_nested_delimiter='__',
        json_file=CONFIG_FILE,
        json_file_encoding='utf-8',
        extra='ignore',
    )

    aws: AwsSettings
    router: RouterSettings = RouterSettings()
    table: TableSettings = TableSettings()
    logger_level: Literal['DEBUG', 'INFO', 'WARNING', 'ERROR'] = 'INFO'

    @field_validator('logger_level', mode='before')
    @classmethod
    def upper_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, JsonConfigSettingsSource(settings_cls)


def load_settings(config_file: str | None = None) -> Settings:
    """Load settings from a JSON file; environment variables override it.

    The path defaults to $CATALOG_CONFIG, then ./config.json.
    """
    config_file = config_file or getenv(CONFIG_ENV_VAR) or CONFIG_FILE
    if not path.isfile(config_file):
        raise ConfigurationError('config file not found', context={'path': config_file})

    class FileSettings(Settings):
        model_config = SettingsConfigDict(json_file=config_file)

    try:
        return FileSettings()
    except ValueError as error:
        raise ConfigurationError(f'invalid config file: {error}', original_error=error,
                                 context={'path': config_file}) from error

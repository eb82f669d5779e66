import yaml
from utils.models.general_models import NextBlockToProcess
from pydantic import BaseModel
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from sqlalchemy.exc import SQLAlchemyError
from utils.session import Session
from typing import Optional
import logging


class ProcessorConfig(BaseModel):
    type: str


class BlockSourceConfig(BaseModel):
    type: str = "streamer_message_file"
    # Newline-delimited NEAR Lake StreamerMessage JSON
    path: str


class ServerConfig(BaseModel):
    processor_config: ProcessorConfig
    block_source_config: BlockSourceConfig
    # When unset, results are only logged and no checkpoint is kept
    postgres_connection_string: Optional[str] = None
    starting_block_height: Optional[int] = None
    ending_block_height: Optional[int] = None


class Config(BaseSettings):
    health_check_port: int
    server_config: ServerConfig

    model_config = SettingsConfigDict(env_nested_delimiter="__")

    # change order of priority of settings sources such that environment variables take precedence over config file settings
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return env_settings, init_settings, file_secret_settings

    @classmethod
    def from_yaml_file(cls, path: str):
        with open(path, "r") as file:
            config = yaml.safe_load(file)

        return cls(**config)

    def get_starting_block_height(self, processor_name: str) -> int:
        next_block_to_process = None

        if self.server_config.postgres_connection_string is not None:
            try:
                with Session() as session, session.begin():
                    next_block_to_process_from_db = session.get(
                        NextBlockToProcess, processor_name
                    )
                    if next_block_to_process_from_db is not None:
                        next_block_to_process = (
                            next_block_to_process_from_db.next_block_height
                        )
            except SQLAlchemyError:
                logging.warning(
                    "[Config] Database error when getting NextBlockToProcess. Skipping..."
                )

        # By default, if nothing is set, start from 0
        starting_block_height = 0
        if self.server_config.starting_block_height is not None:
            # Start from config's starting_block_height
            logging.info("[Config] Starting from config starting_block_height")
            starting_block_height = self.server_config.starting_block_height
        elif next_block_to_process is not None:
            # Start from next block to process in db
            logging.info("[Config] Starting from block height from db")
            starting_block_height = next_block_to_process
        else:
            logging.info("[Config] Starting from block height 0")

        return starting_block_height

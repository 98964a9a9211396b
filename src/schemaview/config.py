"""Library configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Logging
    log_level: str = "info"
    json_logs: bool = False

    # Check every schema document against the draft-03 metaschema before compiling
    check_schema_documents: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "SCHEMAVIEW_",
        "extra": "ignore",
    }


settings = Settings()

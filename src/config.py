from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from src.errors import ConfigurationError

DEFAULT_REGION = "ap-northeast-2"
MAX_EXPIRES_IN = 7 * 24 * 3600  # presigned URL の上限 (7日)


class Settings(BaseSettings):
    s3_bucket: str
    aws_region: str | None = None
    aws_default_region: str | None = None
    s3_prefix: str = "codex-v0/"
    url_expires_in: int = Field(default=86400, gt=0, le=MAX_EXPIRES_IN)
    mcp_auth_token: str | None = None  # streamable-http のときだけ使う
    host: str = "127.0.0.1"
    port: int = 8080
    transport: Literal["stdio", "streamable-http"] = "stdio"

    model_config = {"env_file": ".env", "extra": "ignore", "frozen": True}

    @field_validator("s3_bucket")
    @classmethod
    def _bucket_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("S3_BUCKET must not be empty")
        return value

    @field_validator("s3_prefix")
    @classmethod
    def _strip_leading_slashes(cls, value: str) -> str:
        return value.lstrip("/")

    @property
    def region(self) -> str:
        return self.aws_region or self.aws_default_region or DEFAULT_REGION


def load_settings(**overrides) -> Settings:
    try:
        return Settings(**overrides)
    except ValidationError as e:
        names = ", ".join(
            ".".join(str(part) for part in err["loc"]).upper() for err in e.errors()
        )
        raise ConfigurationError(f"Invalid or missing env: {names}\n{e}") from e

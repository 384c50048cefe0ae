"""Client configuration using Pydantic Settings.

Values come from ``REDISEARCH_*`` environment variables (or a ``.env`` file)
and are validated when the settings object is built.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import redis
from redis.backoff import NoBackoff
from redis.retry import Retry


class ObservabilityCollectorConfig(BaseModel):
    """Configuration for OTLP trace/metrics/log export."""

    model_config = {"extra": "forbid"}

    enabled: Annotated[
        bool,
        Field(description="Enable OTLP export to an external collector"),
    ] = False

    otlp_protocol: Annotated[
        Literal["http", "grpc"],
        Field(description="OTLP transport protocol"),
    ] = "grpc"

    collector_endpoint: Annotated[
        str,
        Field(
            description="OTLP collector endpoint (HTTP uses /v1/traces)",
            examples=["http://localhost:4317", "http://localhost:4318/v1/traces"],
        ),
    ] = "http://localhost:4317"

    headers: dict[str, str] = Field(default_factory=dict, description="Headers sent with OTLP requests")

    timeout_seconds: Annotated[
        int,
        Field(ge=1, le=60, description="OTLP exporter timeout in seconds"),
    ] = 10

    grpc_insecure: Annotated[
        bool,
        Field(description="Allow plaintext gRPC connections"),
    ] = True

    resource_attributes: dict[str, str] = Field(
        default_factory=dict, description="Additional OpenTelemetry resource attributes"
    )


class ClientSettings(BaseSettings):
    """Connection and client defaults loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="REDISEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Connection
    host: str = Field(default="localhost", description="Server host")
    port: int = Field(default=6379, ge=1, le=65535, description="Server port")
    db: int = Field(default=0, ge=0, description="Logical database number")
    password: str | None = Field(default=None, description="AUTH password")
    socket_timeout: float | None = Field(default=None, gt=0, description="Per-command socket timeout in seconds")

    # Client defaults
    index_name: str = Field(default="idx", min_length=1, description="Default index name")

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    observability: ObservabilityCollectorConfig = Field(default_factory=ObservabilityCollectorConfig)

    @model_validator(mode="before")
    @classmethod
    def _split_address(cls, data: object) -> object:
        # "host:port" or "[v6addr]:port" in REDISEARCH_HOST wins over REDISEARCH_PORT;
        # a bare IPv6 literal has more than one colon and is left alone
        if isinstance(data, dict):
            host = data.get("host")
            if isinstance(host, str):
                if host.startswith("[") and "]" in host:
                    name, _, rest = host[1:].partition("]")
                    if rest.startswith(":") and rest[1:].isdigit():
                        return {**data, "host": name, "port": int(rest[1:])}
                    return {**data, "host": name}
                if host.count(":") == 1:
                    name, _, port = host.partition(":")
                    if port.isdigit():
                        return {**data, "host": name, "port": int(port)}
        return data

    @property
    def address(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    def redis_connection_kwargs(self) -> dict[str, object]:
        # Single attempt: transport errors surface to the caller unretried
        kwargs: dict[str, object] = {
            "host": self.host,
            "port": self.port,
            "db": self.db,
            "retry": Retry(NoBackoff(), 0),
        }
        if self.password:
            kwargs["password"] = self.password
        if self.socket_timeout is not None:
            kwargs["socket_timeout"] = self.socket_timeout
        return kwargs

    def create_connection(self) -> redis.Redis:
        """Build a ``redis.Redis`` client; pooling is handled by redis-py."""
        return redis.Redis(**self.redis_connection_kwargs())

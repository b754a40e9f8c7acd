"""Runtime settings read from environment variables."""

import os

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Application settings.

    Read once by the app factory; tests build instances directly.
    """

    environment: str = Field(default="dev", description="Deployment environment")
    table_prefix: str = Field(..., description="Prefix for DynamoDB table names")
    aws_region: str | None = Field(default=None, description="AWS region for DynamoDB")
    db_max_connect_attempts: int = Field(default=5, ge=1)
    db_connect_cooldown_seconds: float = Field(default=10.0, ge=0)
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment.

        Variables:
            ENVIRONMENT: dev/prod (default dev)
            DYNAMODB_TABLE_PREFIX: defaults to bhraman-{ENVIRONMENT}
            AWS_DEFAULT_REGION: passed to boto3
            DB_MAX_CONNECT_ATTEMPTS: failures before cooldown (default 5)
            DB_CONNECT_COOLDOWN_SECONDS: cooldown window (default 10)
            CORS_ALLOW_ORIGINS: comma separated origins
        """
        environment = os.getenv("ENVIRONMENT", "dev")
        values: dict = {
            "environment": environment,
            "table_prefix": os.getenv("DYNAMODB_TABLE_PREFIX", f"bhraman-{environment}"),
            "aws_region": os.getenv("AWS_DEFAULT_REGION"),
            "db_max_connect_attempts": int(os.getenv("DB_MAX_CONNECT_ATTEMPTS", "5")),
            "db_connect_cooldown_seconds": float(
                os.getenv("DB_CONNECT_COOLDOWN_SECONDS", "10")
            ),
        }
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            values["cors_allow_origins"] = [o.strip() for o in origins.split(",") if o.strip()]
        return cls(**values)

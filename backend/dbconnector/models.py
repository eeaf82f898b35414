"""
Pydantic models: connection profiles, pool tuning and operation results.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dbconnector.core.errors import ErrorKind

# ---------------------------------------------------------------------------
# Connection profiles
# ---------------------------------------------------------------------------


class ProductTypeEnum(str, Enum):
    """Supported database product types (postgres, mysql, trino)."""

    POSTGRES = "postgres"
    MYSQL = "mysql"
    TRINO = "trino"


class PoolConfig(BaseModel):
    """Per-connection pool overrides. ``None`` falls back to settings."""

    max_active: int | None = Field(default=None, ge=1)
    max_idle: int | None = Field(default=None, ge=0)
    max_wait_sec: float | None = Field(default=None, ge=0)
    max_age_sec: float | None = Field(default=None, gt=0)
    validation_idle_sec: float | None = Field(default=None, ge=0)


class ConnectionProfile(BaseModel):
    """Everything needed to open a session for one logical connection name."""

    name: str = Field(..., min_length=1, max_length=255)
    product_type: ProductTypeEnum
    host: str = Field(..., min_length=1, max_length=255)
    port: int | None = Field(default=None, ge=1, le=65535)
    database: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(default="", max_length=512)
    use_ssl: bool = Field(
        default=False,
        description="For Trino: use HTTPS. When True, password is required.",
    )
    pool: PoolConfig = Field(default_factory=PoolConfig)

    @model_validator(mode="after")
    def trino_ssl_requires_password(self) -> "ConnectionProfile":
        if (
            self.product_type == ProductTypeEnum.TRINO
            and self.use_ssl
            and not (self.password and self.password.strip())
        ):
            raise ValueError("Password is required for Trino when using SSL/HTTPS.")
        return self


# ---------------------------------------------------------------------------
# Operation results
# ---------------------------------------------------------------------------


class OperationResult(BaseModel):
    """Outcome of a write operation (update / execute)."""

    model_config = ConfigDict(frozen=True)

    operation: str
    success: bool
    message: str


class OperationFailure(BaseModel):
    """Structured error record handed back to the caller."""

    model_config = ConfigDict(frozen=True)

    operation: str
    code: ErrorKind
    message: str
    detail: str | None = None

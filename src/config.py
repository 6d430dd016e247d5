from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List, Optional

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        case_sensitive = False,
        env_file = ".env", # Load environment variables from .env file, if available
        extra = "ignore", # Ignore any extra fields not defined in the model
    )

    # All env vars should be declared manually, never assume automatic behavior
    # Apart from constants or required env vars, you should verify the values exist at runtime
    app_env: str = Field(validation_alias="APP_ENV", pattern=r'^(development|production)$', default="development")

    # Credential store, required for any account operation
    database_url: Optional[str] = Field(validation_alias="DATABASE_URL", default=None)
    db_pool_size: int = Field(validation_alias="DB_POOL_SIZE", default=10, ge=1)

    # Session tokens, JWT_SECRET must be set before login or any protected route works
    jwt_secret: Optional[str] = Field(validation_alias="JWT_SECRET", default=None)
    jwt_algorithm: str = Field(validation_alias="JWT_ALGORITHM", default="HS256")
    token_ttl_hours: int = Field(validation_alias="TOKEN_TTL_HOURS", default=8, ge=1)
    bcrypt_rounds: int = Field(validation_alias="BCRYPT_ROUNDS", default=10, ge=4, le=31)

    # Teacher web app calls
    verify_timeout_seconds: float = Field(validation_alias="VERIFY_TIMEOUT_SECONDS", default=10.0, gt=0)
    submit_timeout_seconds: float = Field(validation_alias="SUBMIT_TIMEOUT_SECONDS", default=15.0, gt=0)

    # HTTP surface
    cors_origins: List[str] = Field(validation_alias="CORS_ORIGINS", default=["*"])
    max_body_bytes: int = Field(validation_alias="MAX_BODY_BYTES", default=200 * 1024, gt=0)

    # Logging
    log_level: str = Field(validation_alias="LOG_LEVEL", default="INFO")
    log_file: Optional[str] = Field(validation_alias="LOG_FILE", default=None)

settings = Settings()

# Application Constants
APP_VERSION = "1.0.0"
PRESENT_MATRIX_SIZE = 100

from pydantic_settings import BaseSettings

class Settings(BaseSettings):

    ENV: str = "dev"                # "dev" / "staging" / "prod"
    SERVICE_NAME: str = "bookbridge"
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    TOKEN_SECRET: str = "dev-secret-change-me"
    TOKEN_ALGO: str = "HS256"
    SESSION_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    VERIFICATION_TOKEN_EXPIRE_HOURS: int = 24
    PASS_HASH_SCHEME: str = "pbkdf2_sha256"
    DEFAULT_ROLE: str = "USER"
    COLLECTION_WRITE_POLICY: str = "lock"   # "lock" / "none"
    PLACEHOLDER_USER_ID: str = "user123"

    class Config:
        env_file = ".env"
        extra="ignore"

config_settings = Settings()

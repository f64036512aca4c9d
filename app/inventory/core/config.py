from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    APP_NAME: str = "Retail Inventory API"
    SECRET_KEY: str = ""
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 120
    JWT_ISSUER: str | None = None
    JWT_AUDIENCE: str | None = None
    DATABASE_URL: str = "sqlite+pysqlite:///./inventory.db"
    ADMIN_LIST_TENANT_FILTER: bool = True
    LIST_MAX_PAGE_SIZE: int = 200
    DEFAULT_STORE_NAME: str = "Default Store"
    DEFAULT_STORE_ADDRESS: str | None = None
    SUPERADMIN_USERNAME: str = "superadmin"
    SUPERADMIN_PASSWORD: str = "change-me"
    SEED_SAMPLE_PRODUCTS: bool = True

settings = Settings()

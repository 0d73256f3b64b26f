from os import getenv


class Settings:
    DATABASE_URL = getenv("DATABASE_URL", "postgresql+psycopg://tasker:tasker@db:5432/tasker")
    DB_POOL_SIZE = int(getenv("DB_POOL_SIZE", "10"))
    DB_MAX_OVERFLOW = int(getenv("DB_MAX_OVERFLOW", "20"))
    DB_ECHO = getenv("DB_ECHO", "false").lower() == "true"

    JWT_SECRET = getenv("JWT_SECRET", "dev-secret-change-in-prod")
    JWT_ALGORITHM = getenv("JWT_ALGORITHM", "HS256")

    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")

    DEFAULT_PAGE_LIMIT = int(getenv("DEFAULT_PAGE_LIMIT", "20"))
    MAX_PAGE_LIMIT = int(getenv("MAX_PAGE_LIMIT", "100"))

settings = Settings()

# bookstore/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Bookstore API"
    env: str = os.getenv("ENV", "dev")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8080"))

    # Database (any Tortoise URL; sqlite file by default)
    database_url: str = os.getenv("DATABASE_URL", "sqlite://bookstore.sqlite3")
    # Create tables on startup instead of running Aerich migrations (dev / sqlite only)
    db_generate_schemas: bool = os.getenv("DB_GENERATE_SCHEMAS", "false").lower() in ("true", "1", "yes")

    # JWT settings
    # When no secret is configured a random key is generated per app instance,
    # so tokens stop working after a restart.
    jwt_secret: str | None = os.getenv("JWT_SECRET")
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS512")
    jwt_issuer: str = "bookstore"
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15"))

    # Default admin created on first startup (skipped when no password is set)
    admin_username: str = os.getenv("ADMIN_USERNAME", "admin")
    admin_password: str | None = os.getenv("ADMIN_PASSWORD")

settings = Settings()  # Instantiate configuration

import os
from typing import List
from urllib.parse import quote_plus

from dotenv import load_dotenv

load_dotenv()


class ConfigurationError(RuntimeError):
    pass


def _clean_password(raw: str) -> str:
    # .env files sometimes wrap the password in quotes or escape '$'
    password = raw or ""
    if len(password) >= 2 and password[0] == password[-1] and password[0] in ("'", '"'):
        password = password[1:-1]
    return password.replace("\\$", "$")


def _split_csv(raw: str) -> List[str]:
    return [part.strip() for part in (raw or "").split(",") if part.strip()]


class Settings:
    database_url_override: str = os.getenv("DATABASE_URL", "")
    database_host: str = os.getenv("DATABASE_HOST", "")
    database_port: int = int(os.getenv("DATABASE_PORT", "5432"))
    database_name: str = os.getenv("DATABASE_NAME", "")
    database_user: str = os.getenv("DATABASE_USER", "")
    database_password: str = _clean_password(os.getenv("DATABASE_PASSWORD", ""))
    database_echo: bool = os.getenv("DATABASE_ECHO", "False").lower() == "true"

    # Pool settings
    database_pool_size: int = int(os.getenv("DATABASE_POOL_SIZE", "20"))
    database_connect_timeout: float = float(os.getenv("DATABASE_CONNECT_TIMEOUT", "2"))
    database_pool_recycle: int = int(os.getenv("DATABASE_POOL_RECYCLE", "30"))

    # Inventory
    default_location_cmf_id: int = int(os.getenv("DEFAULT_LOCATION_CMF_ID", "76179597"))
    excluded_location_codes: List[str] = _split_csv(os.getenv("EXCLUDED_LOCATION_CODES", "GMI,POC,COR"))
    rv_image_mapping_path: str = os.getenv("RV_IMAGE_MAPPING_PATH", "data/rv-images/image-mapping.json")

    # Signup
    company_email_domain: str = os.getenv("COMPANY_EMAIL_DOMAIN", "kiewit.com").lower()
    pin_ttl_minutes: int = int(os.getenv("PIN_TTL_MINUTES", "15"))
    return_test_pin: bool = os.getenv("RETURN_TEST_PIN", "False").lower() == "true"

    # Pricing
    employee_discount_rate: float = float(os.getenv("EMPLOYEE_DISCOUNT_RATE", "0.15"))

    # External services
    google_maps_api_key: str = os.getenv("GOOGLE_MAPS_API_KEY", "")
    distance_matrix_url: str = os.getenv(
        "DISTANCE_MATRIX_URL",
        "https://maps.googleapis.com/maps/api/distancematrix/json"
    )
    geocoder_url: str = os.getenv("GEOCODER_URL", "https://nominatim.openstreetmap.org/search")
    geocoder_user_agent: str = os.getenv("GEOCODER_USER_AGENT", "RV-Employee-Portal/1.0")
    http_timeout: float = float(os.getenv("HTTP_TIMEOUT", "10"))

    # App
    enable_debug_routes: bool = os.getenv("ENABLE_DEBUG_ROUTES", "False").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    cors_origins: List[str] = _split_csv(os.getenv("CORS_ORIGINS", "*"))

    @property
    def database_url(self) -> str:
        """Async SQLAlchemy URL, either DATABASE_URL or assembled from the DATABASE_* parts."""
        if self.database_url_override:
            url = self.database_url_override
            if url.startswith("postgresql://"):
                url = "postgresql+asyncpg://" + url[len("postgresql://"):]
            return url

        if not (self.database_host and self.database_name and self.database_user and self.database_password):
            raise ConfigurationError(
                "Missing required database environment variables. Check your .env file."
            )
        return (
            f"postgresql+asyncpg://{quote_plus(self.database_user)}:{quote_plus(self.database_password)}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )


settings = Settings()

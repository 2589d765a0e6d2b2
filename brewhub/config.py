import os

class BaseConfig:
    JSON_SORT_KEYS = False
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "*")
    RATELIMIT_STORAGE_URL = os.getenv("RATELIMIT_STORAGE_URL", "memory://")
    ORDER_LIMIT_PER_IP = os.getenv("ORDER_LIMIT_PER_IP", "20 per hour")
    # Tokens are issued by the external auth provider; we only verify them
    AUTH_JWT_SECRET = os.getenv("AUTH_JWT_SECRET", "dev-insecure-jwt-key")
    AUTH_JWT_AUDIENCE = os.getenv("AUTH_JWT_AUDIENCE", "authenticated")
    # "database" keeps carts in cart_snapshot; "file" writes one JSON file per cart
    CART_STORAGE_BACKEND = os.getenv("CART_STORAGE_BACKEND", "database")
    CART_STORAGE_DIR = os.getenv("CART_STORAGE_DIR", ".carts")
    MAX_QUANTITY_PER_ITEM = int(os.getenv("MAX_QUANTITY_PER_ITEM", 50))
    OTEL_SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "brewhub-api")
    OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv(
        "OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318/v1/traces"
    )

class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-insecure-key")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///dev.db")

class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-key"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    AUTH_JWT_SECRET = "test-jwt-secret"
    RATELIMIT_ENABLED = False

class ProductionConfig(BaseConfig):
    DEBUG = False
    TESTING = False
    SECRET_KEY = os.getenv("SECRET_KEY")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL")
    AUTH_JWT_SECRET = os.getenv("AUTH_JWT_SECRET")

    @staticmethod
    def validate():
        missing = []
        for name in ("SECRET_KEY", "DATABASE_URL", "AUTH_JWT_SECRET"):
            if not os.getenv(name):
                missing.append(name)
        if missing:
            raise RuntimeError(
                f"Missing required env vars in production: {', '.join(missing)}"
            )

def get_config_class():
    env = os.getenv("APP_ENV", "development").lower()
    if env == "production":
        ProductionConfig.validate()
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig

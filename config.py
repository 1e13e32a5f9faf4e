import os

from starlette.config import Config
from starlette.datastructures import CommaSeparatedStrings, Secret

# If APP_CONFIG is set, use that as the path to the .env file, or default to .env
env_file = os.getenv("APP_CONFIG", ".env")
if "APP_CONFIG" in os.environ and not os.path.isfile(env_file):
    raise FileNotFoundError(f"The configuration file specified in APP_CONFIG does not exist: {env_file}")

config = Config(env_file)

# JWT Configuration
JWT_SECRET_KEY: Secret = config("JWT_SECRET_KEY", cast=Secret)
JWT_ALGORITHM: str = config("JWT_ALGORITHM", default="HS256")
JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = config(
    "JWT_ACCESS_TOKEN_EXPIRE_MINUTES", cast=int, default=60
)
JWT_ISSUER: str = config("JWT_ISSUER", default="storefront-api")
JWT_AUDIENCE: str = config("JWT_AUDIENCE", default="storefront-frontend")

# Application Configuration
CORS_ORIGINS: CommaSeparatedStrings = config(
    "CORS_ORIGINS", cast=CommaSeparatedStrings, default=CommaSeparatedStrings([])
)
FRONTEND_URL: str = config("FRONTEND_URL", default="http://localhost:3000")

# AWS SES Configuration
AWS_REGION: str = config("AWS_REGION", default="us-east-2")
AWS_ACCESS_KEY: Secret = config("AWS_ACCESS_KEY", cast=Secret)
AWS_SECRET_ACCESS_KEY: Secret = config("AWS_SECRET_ACCESS_KEY", cast=Secret)
AWS_SES_SENDER_EMAIL: str = config("AWS_SES_SENDER_EMAIL", default="no-reply@storefront.local")
EMAIL_SEND_TIMEOUT_SECONDS: int = config("EMAIL_SEND_TIMEOUT_SECONDS", cast=int, default=10)

# OTP and Reset Token Configuration
OTP_CHARACTER_LENGTH: int = config("OTP_CHARACTER_LENGTH", cast=int, default=6)
OTP_LIFETIME_MINUTES: int = config("OTP_LIFETIME_MINUTES", cast=int, default=5)
RESET_TOKEN_BYTES: int = config("RESET_TOKEN_BYTES", cast=int, default=20)
RESET_TOKEN_LIFETIME_MINUTES: int = config(
    "RESET_TOKEN_LIFETIME_MINUTES", cast=int, default=15
)

# Database Configuration
DATABASE_URL: str = config("DATABASE_URL", default="sqlite:///./storefront.db")

# Scheduled Job Configuration
EXPIRED_OTP_CLEANUP_INTERVAL_SECONDS: int = config(
    "EXPIRED_OTP_CLEANUP_INTERVAL_SECONDS", cast=int, default=60
)

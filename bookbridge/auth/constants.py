from bookbridge.config.settings import config_settings
from bookbridge.common.logging_setup import get_logger

logger = get_logger("bookbridge.auth")

SESSION_TOKEN_TTL_SECONDS = config_settings.SESSION_TOKEN_EXPIRE_MINUTES * 60

REFRESH_TOKEN_TTL_SECONDS = config_settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 3600

VERIFICATION_TOKEN_TTL_SECONDS = config_settings.VERIFICATION_TOKEN_EXPIRE_HOURS * 3600

SESSION_TOKEN_TYPE = "session"

REFRESH_TOKEN_TYPE = "refresh"

EMAIL_VERIFICATION = "EMAIL_VERIFICATION"

# single-round unsalted SHA-256, what the first app versions stored
LEGACY_HASH_SCHEME = "hex_sha256"

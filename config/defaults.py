"""Default configuration values."""

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3333

DEFAULT_CORS_ORIGINS = "*"

DEFAULT_LOG_LEVEL = "INFO"

# Frames buffered per stream before the connection is dropped as too slow
DEFAULT_MAX_PENDING_FRAMES = 1000

# Seconds between SSE keep-alive comments
DEFAULT_SSE_PING_SECONDS = 15

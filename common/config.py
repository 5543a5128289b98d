import os

# Credential for the prediction service. Checked at app startup, see require_api_token().
REPLICATE_API_TOKEN = os.getenv("REPLICATE_API_TOKEN")
REPLICATE_API_BASE = os.getenv("REPLICATE_API_BASE", "https://api.replicate.com/v1").rstrip("/")
REPLICATE_TIMEOUT = float(os.getenv("REPLICATE_TIMEOUT", "30"))

# Public base URL the prediction service can call back on.
# Deployed: PUBLIC_BASE_URL or VERCEL_URL. Local development: NGROK_HOST.
if os.getenv("PUBLIC_BASE_URL"):
    WEBHOOK_HOST = os.getenv("PUBLIC_BASE_URL").rstrip("/")
elif os.getenv("VERCEL_URL"):
    WEBHOOK_HOST = f"https://{os.getenv('VERCEL_URL')}"
else:
    WEBHOOK_HOST = os.getenv("NGROK_HOST")

POLL_INTERVAL = 0.25  # seconds

# Where the command-line client finds the gateway
GATEWAY_URL = os.getenv("GATEWAY_URL", "http://localhost:8000").rstrip("/")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def require_api_token() -> str:
    if not REPLICATE_API_TOKEN:
        raise RuntimeError(
            "The REPLICATE_API_TOKEN environment variable is not set. "
            "Set it to your Replicate API token before starting the server."
        )
    return REPLICATE_API_TOKEN

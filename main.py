from fastapi import FastAPI
from dotenv import load_dotenv
import logging
from routers import followings
from utils.settings import load_upstream_settings, CREDENTIAL_ENV_VARS

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def validate_upstream_configuration():
    """
    Log the upstream integration status at startup.

    A missing credential does not stop the process: requests fail with a 500
    ConfigurationError until the operator sets it.
    """
    settings = load_upstream_settings()

    if settings.credential_configured:
        logger.info("=" * 60)
        logger.info("Upstream integration ENABLED")
        logger.info(f"  Adapter: {settings.adapter}")
        logger.info(f"  Base URL override: {settings.base_url or 'none'}")
        logger.info(f"  Timeout: {settings.timeout_seconds}s")
        logger.info("=" * 60)
    else:
        logger.warning("=" * 60)
        logger.warning("Upstream integration NOT CONFIGURED")
        logger.warning(f"Missing credential ({' or '.join(CREDENTIAL_ENV_VARS)})")
        logger.warning("Followings requests will fail with HTTP 500 until it is set")
        logger.warning("=" * 60)


# Call validation at startup
validate_upstream_configuration()

app = FastAPI(title="Followings Gateway")

# Include routers
app.include_router(followings.router)


@app.get("/health")
def health():
    settings = load_upstream_settings()
    return {
        "status": "ok",
        "adapter": settings.adapter,
        "credential_configured": settings.credential_configured,
    }

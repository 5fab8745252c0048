import logging
import os
import sys
import traceback

import uvicorn

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

# Add the src directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(current_dir, "src")
sys.path.insert(0, src_path)

logger.info("=" * 60)
logger.info("MedReminder Backend Startup")
logger.info("=" * 60)
logger.info(f"Python version: {sys.version.split()[0]}")
logger.info(f"Source path: {src_path}")

# Log critical environment variables (without exposing secrets)
logger.info("Environment Configuration:")
logger.info(f"  PORT: {os.environ.get('PORT', '8000')}")
logger.info(f"  APP_ENV: {os.environ.get('APP_ENV', 'not set')}")
logger.info(f"  MONGO_URI: {'✅ set' if os.environ.get('MONGO_URI') else '❌ not set'}")
logger.info(f"  MONGO_DB_NAME: {os.environ.get('MONGO_DB_NAME', 'not set')}")
logger.info(f"  API_KEYS: {'✅ set' if os.environ.get('API_KEYS') else '❌ not set'}")
logger.info(f"  REMINDER_TIMEZONE: {os.environ.get('REMINDER_TIMEZONE', 'UTC')}")
logger.info(f"  DOSE_SWEEPER_ENABLED: {os.environ.get('DOSE_SWEEPER_ENABLED', 'false')}")

if __name__ == "__main__":
    try:
        from medreminder.core.config import get_settings

        settings = get_settings()
        port = int(os.environ.get("PORT", settings.port))
        host = os.environ.get("HOST", settings.host)

        logger.info("Step 1: Importing medreminder.app...")
        from medreminder.app import app  # noqa: F401

        logger.info(f"Step 2: Starting uvicorn server on {host}:{port}...")
        uvicorn.run(
            "medreminder.app:app",
            host=host,
            port=port,
            workers=1,
            log_level=settings.logging.level.lower(),
            access_log=True,
            timeout_keep_alive=75,
            timeout_graceful_shutdown=30,
        )
    except KeyboardInterrupt:
        logger.info("⚠️  Shutting down due to keyboard interrupt")
        sys.exit(0)
    except Exception as e:
        logger.error(f"❌ CRITICAL: Failed to start application: {type(e).__name__}: {e}")
        logger.error(traceback.format_exc())
        logger.error("Troubleshooting steps:")
        logger.error("1. Verify MONGO_URI is set and reachable")
        logger.error("2. Verify REMINDER_TIMEZONE is a valid IANA timezone name")
        logger.error("3. Check if the app is binding to the correct port (should be 0.0.0.0:8000)")
        sys.exit(1)

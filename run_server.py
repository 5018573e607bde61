import os

import uvicorn

from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="server")


if __name__ == "__main__":
    setup_logging(level=os.getenv("GUIDE_LOG_LEVEL", "INFO"), job_name="weather_guide")
    port = int(os.getenv("PORT", 8000))
    logger.info("Starting weather guide server", extra={"port": port})

    uvicorn.run(
        "weather_guide.main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
        log_config=None,
    )

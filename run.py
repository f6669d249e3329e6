"""Run the AI Provider Gateway application."""

import uvicorn

from provider_gateway.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "provider_gateway.main:app",
        host=settings.app_host,
        port=settings.app_port,
        log_level=settings.log_level.lower(),
        reload=False,
    )

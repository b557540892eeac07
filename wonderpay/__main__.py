"""
Run the API server: python -m wonderpay
"""

import uvicorn

from wonderpay.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run(
        "wonderpay.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()

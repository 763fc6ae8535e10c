# bookstore/__main__.py
"""
Run the API server: `python -m bookstore`.
"""
import uvicorn

from bookstore.config import settings


def main():
    uvicorn.run(
        "bookstore.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    main()

"""Run the API with uvicorn: ``python -m autoreconcile``."""

import uvicorn

from autoreconcile.config import settings


def main() -> None:
    uvicorn.run(
        "autoreconcile.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=None,
    )


if __name__ == "__main__":
    main()

"""Run the API with uvicorn: ``python -m lessonbook.api``."""

import os

import uvicorn

from lessonbook.logging import setup_logging


def main() -> None:
    setup_logging()
    uvicorn.run(
        "lessonbook.api.app:app",
        host=os.environ.get("LESSONBOOK_HOST", "127.0.0.1"),
        port=int(os.environ.get("LESSONBOOK_PORT", "8000")),
        log_config=None,
    )


if __name__ == "__main__":
    main()

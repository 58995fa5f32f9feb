"""Run the API with uvicorn: `python -m hivemint` or the `hivemint` script."""

import uvicorn

from hivemint.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "hivemint.main:app", host="0.0.0.0", port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

"""Run the CalorieSnap API server: ``python -m caloriesnap``."""

import os

import uvicorn
from dotenv import load_dotenv


def main() -> None:
    # HOST, PORT and LOG_LEVEL may come from .env
    load_dotenv()

    uvicorn.run(
        "caloriesnap.app:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8080")),
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()

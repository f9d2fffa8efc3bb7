"""Main entry point for the support console."""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from support_console import Application, ConsoleConfig
from support_console.api import create_fastapi_app
from support_console.logging_config import setup_logging


def main():
    """Run the console."""
    project_root = Path(__file__).resolve().parent
    load_dotenv(project_root / ".env")
    setup_logging()

    config = ConsoleConfig.from_env()
    app = create_fastapi_app(Application(config=config))

    uvicorn.run(
        app,
        host=config.api_host,
        port=config.api_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()

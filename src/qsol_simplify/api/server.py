"""
ASGI entry point for the qsol-simplify API.

Usage
-----
    $ python -m qsol_simplify.api.server
    $ uvicorn qsol_simplify.api.server:app --reload
"""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from qsol_simplify.api.app import create_app

# Load .env before the factory runs so settings see the same environment.
load_dotenv(dotenv_path=Path(".env"))

app = create_app()


def main(host: str = "127.0.0.1", port: int = 8000, reload: bool = False) -> None:
    """Run the API server with uvicorn."""
    uvicorn.run(
        "qsol_simplify.api.server:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()

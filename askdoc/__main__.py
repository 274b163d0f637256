"""
Command-line entry point.

Runs the AskDoc API with uvicorn on the configured host and port:

    python -m askdoc
"""

import uvicorn

from askdoc.configs import get_settings
from askdoc.main import create_app


def main() -> None:
    """Start the HTTP server."""
    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

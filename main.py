"""Entrypoint to run the Vesture API locally."""

import uvicorn

from server.api import create_app
from vesture_app.app import VestureApp
from vesture_app.config import AppConfig


def main() -> None:
    config = AppConfig.from_env()
    uvicorn.run(create_app(VestureApp(config)), host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    main()

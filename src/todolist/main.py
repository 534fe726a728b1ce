"""Application entry point for the todolist backend server."""

from todolist.app import App
from todolist.config import Config
from todolist.logging import setup_logging
from todolist.web.runner import run_server


def main() -> None:
    config = Config()  # type: ignore[call-arg]
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()

"""Tests for the uvicorn runner."""

import copy

from uvicorn.config import LOGGING_CONFIG

from todolist.app import App
from todolist.web import runner


class TestRunServer:
    """Tests for run_server."""

    def test_log_format_does_not_touch_uvicorn_defaults(self, config, database, monkeypatch):
        defaults = copy.deepcopy(LOGGING_CONFIG)
        calls = []
        monkeypatch.setattr(runner.uvicorn, "run", lambda app, **kwargs: calls.append(kwargs))

        runner.run_server(App(config, database), config)

        assert LOGGING_CONFIG == defaults
        assert calls[0]["log_config"]["formatters"]["default"]["fmt"] == "%(asctime)s - %(levelname)s - %(message)s"
        assert (calls[0]["host"], calls[0]["port"]) == (config.host, config.port)

"""Tests for CLI argument handling, credential resolution and bootstrap."""

from __future__ import annotations

import logging
import logging.handlers
import os
from unittest.mock import MagicMock, patch

import pytest
from keyring.errors import KeyringError

from speedreader.cli import (
    ENV_MINIFLUX_TOKEN,
    ENV_MINIFLUX_URL,
    _configure_color_mode,
    _configure_logging,
    _read_words,
    _resolve_credentials,
    main,
)
from speedreader.models import MODE_BROWSING, MODE_LOGIN, MODE_READING, UserConfig


class FakeCredentialStore:
    def __init__(self, token: str = "", error: Exception | None = None) -> None:
        self.token = token
        self.error = error
        self.calls = 0

    def get_token(self) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.token

    def set_token(self, token: str) -> None:
        self.token = token


class FakeApp:
    """Records the session it was built with and simulates some reading."""

    instances: list[FakeApp] = []

    def __init__(self, session, *, client=None, save_config_fn=None) -> None:
        self.session = session
        self.client = client
        self.save_config_fn = save_config_fn
        FakeApp.instances.append(self)

    def run(self) -> None:
        self.session.session_articles = 2
        self.session.session_words = 1500


@pytest.fixture(autouse=True)
def _reset_fake_app():
    FakeApp.instances.clear()
    yield
    FakeApp.instances.clear()


def _run_main(argv, config=None, **overrides):
    saved: list[UserConfig] = []
    kwargs = {
        "load_config_fn": lambda: config if config is not None else UserConfig(),
        "save_config_fn": lambda cfg: saved.append(cfg) or True,
        "credential_store": FakeCredentialStore(),
        "configure_logging_fn": lambda debug: None,
        "configure_color_mode_fn": lambda mode: None,
        "validate_interactive_tty_fn": lambda: True,
        "client_factory": lambda url, token: MagicMock(name="client"),
        "app_factory": FakeApp,
        "environ": {},
    }
    kwargs.update(overrides)
    return main(argv, **kwargs), saved


class TestReadWords:
    def test_reads_and_splits(self, tmp_path):
        path = tmp_path / "article.txt"
        path.write_text("The quick\nbrown  fox.\n", encoding="utf-8")
        assert _read_words(path) == ["The", "quick", "brown", "fox."]

    def test_missing_file(self, tmp_path, capsys):
        assert _read_words(tmp_path / "nope.txt") == 1
        assert "does not exist" in capsys.readouterr().err

    def test_directory(self, tmp_path, capsys):
        assert _read_words(tmp_path) == 1
        assert "directory" in capsys.readouterr().err

    def test_empty_file(self, tmp_path, capsys):
        path = tmp_path / "empty.txt"
        path.write_text("  \n\t", encoding="utf-8")
        assert _read_words(path) == 1
        err = capsys.readouterr().err
        assert "no words" in err
        assert "Next step:" in err

    def test_unreadable_file(self, tmp_path, capsys):
        path = tmp_path / "locked.txt"
        path.write_text("text", encoding="utf-8")
        with patch("pathlib.Path.read_text", side_effect=PermissionError("denied")):
            assert _read_words(path) == 1
        assert "denied" in capsys.readouterr().err


class TestResolveCredentials:
    def test_environment_wins(self):
        store = FakeCredentialStore(token="stored")
        url, token = _resolve_credentials(
            UserConfig(miniflux_url="https://saved.example.com"),
            store,
            {ENV_MINIFLUX_URL: "https://env.example.com", ENV_MINIFLUX_TOKEN: "env-token"},
        )
        assert (url, token) == ("https://env.example.com", "env-token")
        assert store.calls == 0

    def test_falls_back_to_config_and_keyring(self):
        store = FakeCredentialStore(token="stored")
        url, token = _resolve_credentials(
            UserConfig(miniflux_url="https://saved.example.com"), store, {}
        )
        assert (url, token) == ("https://saved.example.com", "stored")

    def test_no_url_skips_keyring(self):
        store = FakeCredentialStore(token="stored")
        assert _resolve_credentials(UserConfig(), store, {}) == ("", "")
        assert store.calls == 0

    def test_keyring_error_warns(self, capsys):
        store = FakeCredentialStore(error=KeyringError("no backend"))
        url, token = _resolve_credentials(
            UserConfig(miniflux_url="https://saved.example.com"), store, {}
        )
        assert (url, token) == ("https://saved.example.com", "")
        assert "keyring" in capsys.readouterr().err


class TestMain:
    def test_file_argument_starts_reading(self, tmp_path, capsys):
        path = tmp_path / "article.txt"
        path.write_text("one two three", encoding="utf-8")
        code, saved = _run_main([str(path)])
        assert code == 0
        app = FakeApp.instances[0]
        assert app.session.mode == MODE_READING
        assert app.session.words == ["one", "two", "three"]
        assert app.client is None
        assert len(saved) == 1
        out = capsys.readouterr().out
        assert "Session: 2 articles, 1,500 words read." in out

    def test_credentials_start_browsing(self):
        code, _ = _run_main(
            [],
            environ={ENV_MINIFLUX_URL: "https://rss.example.com", ENV_MINIFLUX_TOKEN: "t"},
        )
        assert code == 0
        app = FakeApp.instances[0]
        assert app.session.mode == MODE_BROWSING
        assert app.session.remote
        assert app.client is not None

    def test_missing_credentials_start_login(self):
        code, _ = _run_main([], config=UserConfig(miniflux_url="https://rss.example.com"))
        assert code == 0
        session = FakeApp.instances[0].session
        assert session.mode == MODE_LOGIN
        assert session.login_url.value == "https://rss.example.com"

    def test_totals_folded_into_saved_config(self, tmp_path):
        path = tmp_path / "article.txt"
        path.write_text("words here", encoding="utf-8")
        config = UserConfig(total_articles=1, total_words=100)
        _, saved = _run_main([str(path)], config=config)
        assert saved[0].total_articles == 3
        assert saved[0].total_words == 1600

    def test_missing_file_exits_1_without_ui(self, tmp_path):
        code, saved = _run_main([str(tmp_path / "missing.txt")])
        assert code == 1
        assert FakeApp.instances == []
        assert saved == []

    def test_bad_url_exits_1(self):
        code, _ = _run_main(
            [],
            environ={ENV_MINIFLUX_URL: "rss.example.com", ENV_MINIFLUX_TOKEN: "t"},
            client_factory=lambda url, token: None,
        )
        assert code == 1
        assert FakeApp.instances == []

    def test_non_tty_exits_2(self, tmp_path, capsys):
        path = tmp_path / "article.txt"
        path.write_text("text", encoding="utf-8")
        code, _ = _run_main([str(path)], validate_interactive_tty_fn=lambda: False)
        assert code == 2
        assert "interactive TTY" in capsys.readouterr().err
        assert FakeApp.instances == []

    def test_flags_forwarded(self, tmp_path):
        path = tmp_path / "article.txt"
        path.write_text("text", encoding="utf-8")
        logging_fn = MagicMock()
        color_fn = MagicMock()
        _run_main(
            [str(path), "--debug", "--no-color"],
            configure_logging_fn=logging_fn,
            configure_color_mode_fn=color_fn,
        )
        logging_fn.assert_called_once_with(True)
        color_fn.assert_called_once_with("never")

    def test_color_choice(self, tmp_path):
        path = tmp_path / "article.txt"
        path.write_text("text", encoding="utf-8")
        color_fn = MagicMock()
        _run_main([str(path), "--color", "always"], configure_color_mode_fn=color_fn)
        color_fn.assert_called_once_with("always")

    def test_save_failure_still_exits_0(self, tmp_path):
        path = tmp_path / "article.txt"
        path.write_text("text", encoding="utf-8")
        code, _ = _run_main([str(path)], save_config_fn=lambda cfg: False)
        assert code == 0


class TestConfigureLogging:
    def test_disabled_without_debug(self):
        _configure_logging(False)
        assert logging.root.manager.disable >= logging.CRITICAL

    def test_debug_adds_rotating_handler(self, tmp_path):
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level
        try:
            with patch("speedreader.cli.user_config_dir", return_value=str(tmp_path)):
                _configure_logging(True)
            added = [h for h in root.handlers if h not in before]
            assert len(added) == 1
            assert isinstance(added[0], logging.handlers.RotatingFileHandler)
            assert added[0].maxBytes == 5 * 1024 * 1024
            assert (tmp_path / "debug.log").exists()
        finally:
            for handler in root.handlers[:]:
                if handler not in before:
                    root.removeHandler(handler)
                    handler.close()
            root.setLevel(level)


class TestConfigureColorMode:
    def test_never(self):
        with patch.dict(os.environ, {"FORCE_COLOR": "1"}, clear=False):
            _configure_color_mode("never")
            assert os.environ["NO_COLOR"] == "1"
            assert "FORCE_COLOR" not in os.environ

    def test_always(self):
        with patch.dict(os.environ, {"NO_COLOR": "1"}, clear=False):
            _configure_color_mode("always")
            assert os.environ["FORCE_COLOR"] == "1"
            assert "NO_COLOR" not in os.environ

from __future__ import annotations

import pytest

import catalog_favorites.__main__ as entrypoint
import catalog_favorites.main as app_main
from catalog_favorites.settings import AppSettings


def test_module_import_builds_no_application() -> None:
    assert not hasattr(app_main, "app")


def test_main_runs_uvicorn_with_app_factory(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[tuple, dict]] = []
    monkeypatch.setattr(
        entrypoint, "get_settings", lambda: AppSettings(_env_file=None, port=4100, log_level="DEBUG")
    )
    monkeypatch.setattr(entrypoint.uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))

    entrypoint.main()

    [(args, kwargs)] = calls
    assert args == ("catalog_favorites.main:create_app",)
    assert kwargs["factory"] is True
    assert kwargs["port"] == 4100
    assert kwargs["log_level"] == "debug"

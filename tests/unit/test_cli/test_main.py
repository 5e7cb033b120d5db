"""Tests for the command line entry point."""

from pathlib import Path


def test_build_query_from_arguments():
    from inbox.main import build_parser, build_query

    args = build_parser().parse_args(["--search", "rust", "--unread", "--ascending"])

    query = build_query(args)

    assert query.filter.search == "rust"
    assert query.filter.is_read is False
    assert query.ascending is True


def test_main_scrolls_requested_pages(monkeypatch, capsys, tmp_path: Path, fetcher):
    from inbox.core.di_container import AppContainer
    from inbox.main import main

    monkeypatch.setattr(AppContainer, "page_client", property(lambda self: fetcher))
    config_path = tmp_path / "settings.yml"
    config_path.write_text("scroll:\n  min_load_interval: 0.01\n")

    exit_code = main(["--pages", "2", "--config", str(config_path)])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "Showing 40 of 45 newsletters" in output
    assert "Newsletter 39" in output
    assert [c.offset for c in fetcher.cursors] == [0, 20]


def test_main_reports_fetch_failure(monkeypatch, capsys, tmp_path: Path, fetcher):
    from inbox.core.di_container import AppContainer
    from inbox.core.errors import FetchFailure
    from inbox.main import main

    fetcher.fail_with = FetchFailure("server unavailable")
    monkeypatch.setattr(AppContainer, "page_client", property(lambda self: fetcher))

    exit_code = main(["--config", str(tmp_path / "missing.yml")])

    captured = capsys.readouterr()
    assert exit_code == 1
    assert "server unavailable" in captured.err


def test_main_rejects_zero_pages(capsys):
    from inbox.main import main

    assert main(["--pages", "0"]) == 2

import pytest

import run_otbeat_report
from conftest import make_snippet


@pytest.fixture
def patched_gmail(monkeypatch, fake_gmail):
    """Route the CLI to an in-memory mailbox instead of Google."""
    snippets = {
        "m1": make_snippet(month="07", day="04"),
        "m2": "Your class has been booked",
        "m3": make_snippet(month="06", day="13"),
    }
    pages = [{"messages": [{"id": i} for i in snippets]}]
    seen = {}

    def fake_load_credentials(credentials_path, token_path):
        seen["credentials"] = (credentials_path, token_path)
        return object()

    def fake_build(creds):
        return fake_gmail(pages=pages, snippets=snippets)

    monkeypatch.setattr(run_otbeat_report, "load_credentials", fake_load_credentials)
    monkeypatch.setattr(run_otbeat_report, "build_gmail_service", fake_build)
    return seen


def test_defaults():
    args = run_otbeat_report.parse_args([])
    assert args.sender == "OTbeatReport@orangetheoryfitness.com"
    assert args.output is None
    assert args.credentials == "oauth.json"
    assert args.token == "token.json"
    assert args.workers == 1


def test_main_writes_sorted_csv(tmp_path, patched_gmail):
    out = tmp_path / "otbeat.csv"

    df = run_otbeat_report.main(["-o", str(out), "--token", "tok.json"])

    assert len(df) == 2
    lines = out.read_text().splitlines()
    assert lines[0].startswith("Date,Time,Zone 1")
    assert lines[1].startswith("06/13/2021,12:15,")
    assert lines[2].startswith("07/04/2021,12:15,")
    assert patched_gmail["credentials"] == ("oauth.json", "tok.json")


def test_main_prints_csv_to_stdout(capsys, patched_gmail):
    run_otbeat_report.main(["--from", "someone@example.com", "--workers", "2"])

    captured = capsys.readouterr()
    assert captured.out.splitlines()[0].startswith("Date,Time")
    assert len(captured.out.splitlines()) == 3
    assert "from:someone@example.com" in captured.err


def test_cli_exits_nonzero_on_failure(monkeypatch):
    def boom(*args, **kwargs):
        raise FileNotFoundError("oauth.json")

    monkeypatch.setattr(run_otbeat_report, "load_credentials", boom)
    monkeypatch.setattr("sys.argv", ["otbeat-report"])

    with pytest.raises(SystemExit) as exc:
        run_otbeat_report.cli()
    assert exc.value.code == 1

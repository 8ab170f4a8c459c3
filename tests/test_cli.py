"""Test the command line interface."""

import json

import pytest

from panicreport.cli.main import build_parser, main


def _run(argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


@pytest.fixture(autouse=True)
def isolated_cli(monkeypatch):
    monkeypatch.setattr("panicreport.cli.main.load_dotenv", lambda *a, **k: False)
    monkeypatch.setattr("panicreport.cli.main.setup_logging", lambda level=None: None)


class TestParser:
    def test_submit_defaults(self):
        args = build_parser().parse_args(["submit"])
        assert args.area == "QUERY_ENGINE"
        assert args.strict is False

    def test_endpoint_and_outbox_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["submit", "--endpoint", "x", "--outbox", "y"])


class TestRedactCommand:
    """Test `panicreport redact`."""

    def test_prints_redacted(self, schema_dir, capsys):
        code = _run(["redact", str(schema_dir / "schema.prisma")])

        out = capsys.readouterr().out
        assert code == 0
        assert "s3cr3tPassw0rd" not in out
        assert '"<REDACTED>"' in out

    def test_writes_output_file(self, schema_dir, tmp_path):
        output = tmp_path / "clean.prisma"
        code = _run(["redact", str(schema_dir / "schema.prisma"), "-o", str(output)])

        assert code == 0
        assert "s3cr3tPassw0rd" not in output.read_text(encoding="utf-8")

    def test_show_blocks(self, schema_dir, capsys):
        code = _run(["redact", str(schema_dir / "schema.prisma"), "--show-blocks"])

        blocks = json.loads(capsys.readouterr().out)
        assert code == 0
        assert blocks == [
            {"name": "db", "closed": True, "urls": [{"key": "url", "kind": "LiteralUrl"}]}
        ]

    def test_missing_file(self, tmp_path, capsys):
        code = _run(["redact", str(tmp_path / "nope.prisma")])

        assert code == 1
        assert "Cannot read" in capsys.readouterr().err


class TestSubmitCommand:
    """Test `panicreport submit`."""

    def test_outbox_submit(self, schema_dir, tmp_path, capsys):
        stack = tmp_path / "stack.txt"
        stack.write_text("thread 'main' panicked", encoding="utf-8")
        outbox = tmp_path / "outbox"

        code = _run(
            [
                "submit",
                "--schema",
                str(schema_dir / "schema.prisma"),
                "--stack-file",
                str(stack),
                "--outbox",
                str(outbox),
            ]
        )

        assert code == 0
        assert capsys.readouterr().out.strip() == "1"
        record = json.loads((outbox / "report-1.json").read_text())
        assert record["data"]["rustStackTrace"] == "thread 'main' panicked"
        assert "s3cr3tPassw0rd" not in json.dumps(record)

    def test_failure_is_quiet(self, tmp_path, capsys):
        code = _run(
            ["submit", "--schema", str(tmp_path / "missing.prisma"), "--outbox", str(tmp_path)]
        )

        captured = capsys.readouterr()
        assert code == 1
        assert captured.out == ""

    def test_strict_failure_reports(self, tmp_path, capsys):
        code = _run(
            [
                "submit",
                "--schema",
                str(tmp_path / "missing.prisma"),
                "--outbox",
                str(tmp_path),
                "--strict",
            ]
        )

        assert code == 1
        assert "missing.prisma" in capsys.readouterr().err

    def test_disabled(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PANICREPORT_DISABLED", "1")
        code = _run(["submit", "--outbox", str(tmp_path / "outbox")])

        assert code == 1
        assert not (tmp_path / "outbox").exists()

    def test_bad_config(self, monkeypatch, capsys):
        monkeypatch.setenv("PANICREPORT_TIMEOUT", "nope")
        code = _run(["submit"])

        assert code == 2
        assert "PANICREPORT_TIMEOUT" in capsys.readouterr().err

    def test_bad_request_file(self, tmp_path, capsys):
        request = tmp_path / "request.json"
        request.write_text("{not json", encoding="utf-8")

        code = _run(["submit", "--request-file", str(request), "--outbox", str(tmp_path)])

        assert code == 2


def test_no_command_prints_help(capsys):
    code = _run([])
    assert code == 2
    assert "usage" in capsys.readouterr().out

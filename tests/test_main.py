"""Tests for the command line entry point."""

import pytest
from click.testing import CliRunner

from fastexport_rewriter import __version__
from fastexport_rewriter.main import cli

EXPORT = (
    b"commit refs/heads/master\n"
    b"mark :1\n"
    b"committer A <a@x> 0 +0000\n"
    b"data 9\n"
    b"Fix bug.\n"
    b"property bugs 45 https://bugzilla.mozilla.org/show_bug.cgi?id=1234 \n"
    b"M 100644 :1 a.txt\n"
)

IMPORT = (
    b"commit refs/heads/master\n"
    b"mark :1\n"
    b"committer A <a@x> 0 +0000\n"
    b"data 59\n"
    b"Fix bug.\n\nhttps://bugzilla.mozilla.org/show_bug.cgi?id=1234\n"
    b"M 100644 :1 a.txt\n"
)


@pytest.fixture
def runner():
    return CliRunner()


class TestCli:
    def test_pipe_filter(self, runner):
        result = runner.invoke(cli, ["--newline", "lf"], input=EXPORT)
        assert result.exit_code == 0, result.output
        assert result.stdout_bytes == IMPORT

    def test_files(self, runner, tmp_path):
        source = tmp_path / "export.fi"
        target = tmp_path / "import.fi"
        source.write_bytes(EXPORT)
        result = runner.invoke(cli, ["-i", str(source), "-o", str(target), "--newline", "lf"])
        assert result.exit_code == 0, result.output
        assert target.read_bytes() == IMPORT

    def test_custom_bug_url(self, runner):
        export = (
            b"commit refs/heads/master\nmark :1\ncommitter A <a@x> 0 +0000\n"
            b"data 3\nfix\nproperty bugs 40 https://bugs.launchpad.net/bugs/42 fixed\n"
        )
        result = runner.invoke(
            cli,
            ["--newline", "lf", "--bug-url", "https://bugs.launchpad.net/bugs/{id}"],
            input=export,
        )
        assert result.exit_code == 0, result.output
        assert result.stdout_bytes.endswith(b"data 39\nfix\n\nhttps://bugs.launchpad.net/bugs/42\n")

    def test_stats(self, runner):
        result = runner.invoke(cli, ["--newline", "lf", "--stats"], input=EXPORT)
        assert result.exit_code == 0
        assert "Rewrite summary" in result.output
        assert "Bug references added" in result.output

    def test_bad_bug_url(self, runner):
        result = runner.invoke(cli, ["--bug-url", "https://bugs.example.com/"], input=b"")
        assert result.exit_code == 2
        assert "{id}" in result.output

    def test_bad_block_size(self, runner):
        result = runner.invoke(cli, ["--block-size", "0"], input=b"")
        assert result.exit_code == 2

    def test_malformed_stream(self, runner):
        result = runner.invoke(cli, [], input=b"mark :1\n")
        assert result.exit_code == 1
        assert "No reset or commit in progress" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_skipped_line_printed_verbatim(self, runner):
        result = runner.invoke(cli, ["--newline", "lf"], input=b"progress :100: [bold]x[/bold]\n")
        assert result.exit_code == 0
        assert result.stderr == "Skipping: progress :100: [bold]x[/bold]\n"
        assert result.stdout_bytes == b""

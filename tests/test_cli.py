"""Tests for the CLI implementation."""

import json

import pytest
from typer.testing import CliRunner

from rangestream.cli import app


DATA = bytes(i % 251 for i in range(1000))


class TestCLI:
    """Test the CLI functionality."""

    @pytest.fixture
    def runner(self):
        """CLI test runner."""
        return CliRunner()

    @pytest.fixture
    def video_path(self, tmp_path):
        """A 1000-byte fake video on disk."""
        path = tmp_path / "clip.mp4"
        path.write_bytes(DATA)
        return path

    def test_full_body(self, runner, video_path, tmp_path):
        out = tmp_path / "body.bin"
        result = runner.invoke(app, [str(video_path), "-o", str(out)])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["status"] == 200
        assert payload["mode"] == "full"
        assert payload["headers"]["Content-Type"] == "video/mp4"
        assert payload["headers"]["Accept-Ranges"] == "bytes"
        assert "Content-Range" not in payload["headers"]
        assert "Content-Length" not in payload["headers"]
        assert out.read_bytes() == DATA

    def test_single_range(self, runner, video_path):
        result = runner.invoke(app, [str(video_path), "--range", "bytes=0-499"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["status"] == 206
        assert payload["headers"]["Content-Range"] == "bytes 0-499/1000"
        assert payload["headers"]["Content-Length"] == "500"
        assert payload["bytes_sent"] == 500

    def test_multi_range(self, runner, video_path, tmp_path):
        out = tmp_path / "body.bin"
        result = runner.invoke(app, [
            str(video_path), "-r", "bytes=0-99,900-999",
            "--boundary", "B1", "--content-type", "application/octet-stream", "-o", str(out),
        ])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["mode"] == "multipart"
        assert payload["headers"]["Content-Type"] == "multipart/byteranges; boundary=B1"
        assert "Content-Length" not in payload["headers"]

        body = out.read_bytes()
        assert body.startswith(b"--B1\r\nContent-type: application/octet-stream\r\nContent-Range: bytes 0-99/1000\r\n")
        assert body.endswith(b"\r\n--B1--\r\n")

    def test_unsatisfiable(self, runner, video_path):
        result = runner.invoke(app, [str(video_path), "--range", "bytes=5000-6000"])

        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["status"] == 416
        assert payload["headers"]["Content-Range"] == "bytes */1000"

    def test_validate_flag(self, runner, video_path):
        result = runner.invoke(app, [str(video_path), "--range", "bytes=0-99", "--validate"])
        assert result.exit_code == 0

    def test_small_buffer(self, runner, video_path, tmp_path):
        out = tmp_path / "body.bin"
        result = runner.invoke(app, [str(video_path), "--buffer-size", "7", "-o", str(out)])

        assert result.exit_code == 0
        assert out.read_bytes() == DATA

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(app, [str(tmp_path / "nope.mp4")])
        assert result.exit_code == 1

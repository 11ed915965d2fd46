"""Tests for the cbd command-line interface."""

import io
import sys

import pytest

from cbd.cli import create_parser, main


@pytest.fixture
def stdin_bytes(monkeypatch):
    """Replace stdin with a binary buffer."""

    def _set(data: bytes) -> None:
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data)))

    return _set


class TestCLI:
    """Test argument handling and exit status."""

    @pytest.mark.integration
    def test_parser_defaults(self):
        """Decode mode is the default."""
        args = create_parser().parse_args([])
        assert args.encode is False
        assert args.base64 is False
        assert args.diagnostic is False
        assert args.input is None
        assert args.output is None

    @pytest.mark.integration
    def test_decode_file(self, tmp_path, simple_cbor):
        """Decoding writes JSON followed by a newline."""
        source = tmp_path / "in.cbor"
        target = tmp_path / "out.json"
        source.write_bytes(simple_cbor)

        assert main(["-i", str(source), "-o", str(target)]) == 0
        assert target.read_bytes() == b'{"k":"v"}\n'

    @pytest.mark.integration
    def test_encode_file(self, tmp_path, simple_cbor):
        """Encoding writes raw CBOR without a newline."""
        source = tmp_path / "in.json"
        target = tmp_path / "out.cbor"
        source.write_text('{"k":"v"}\n')

        assert main(["--encode", "--input", str(source), "--output", str(target)]) == 0
        assert target.read_bytes() == simple_cbor

    @pytest.mark.integration
    def test_encode_base64_file(self, tmp_path):
        """--base64 writes URL-safe unpadded base64."""
        source = tmp_path / "in.json"
        target = tmp_path / "out.txt"
        source.write_text('{"k":"v"}')

        assert main(["-e", "-b", "-i", str(source), "-o", str(target)]) == 0
        assert target.read_bytes() == b"oWFrYXY"

    @pytest.mark.integration
    def test_stdin_to_stdout(self, stdin_bytes, capsysbinary):
        """Without file options stdin is read and stdout is written."""
        stdin_bytes(b"oWFrYXY=\n")

        assert main([]) == 0
        assert capsysbinary.readouterr().out == b'{"k":"v"}\n'

    @pytest.mark.integration
    def test_diagnostic_file(self, tmp_path):
        """--diagnostic writes diagnostic notation."""
        source = tmp_path / "in.cbor"
        target = tmp_path / "out.diag"
        source.write_bytes(bytes.fromhex("c100"))

        assert main(["-d", "-i", str(source), "-o", str(target)]) == 0
        assert b"1(0)" in target.read_bytes().replace(b" ", b"")

    @pytest.mark.integration
    def test_decode_failure(self, tmp_path, capsys):
        """Failures return status 1, report the cause and write nothing."""
        source = tmp_path / "empty.cbor"
        target = tmp_path / "out.json"
        source.write_bytes(b"")

        assert main(["-i", str(source), "-o", str(target)]) == 1
        assert not target.exists()
        err = capsys.readouterr().err
        assert "cbd: failed to decode binary data: failed to decode CBOR" in err

    @pytest.mark.integration
    def test_encode_failure(self, tmp_path, capsys):
        """Invalid JSON returns status 1."""
        source = tmp_path / "bad.json"
        source.write_text("[1,]")

        assert main(["-e", "-i", str(source)]) == 1
        assert "failed to encode JSON data" in capsys.readouterr().err

    @pytest.mark.integration
    def test_missing_input_file(self, tmp_path, capsys):
        """An unreadable input file returns status 1."""
        assert main(["-i", str(tmp_path / "missing")]) == 1
        assert "cbd:" in capsys.readouterr().err

    @pytest.mark.integration
    def test_unwritable_output(self, tmp_path, simple_cbor, capsys):
        """An output path that cannot be opened returns status 1."""
        source = tmp_path / "in.cbor"
        source.write_bytes(simple_cbor)

        assert main(["-i", str(source), "-o", str(tmp_path)]) == 1
        assert "cbd: failed to write output" in capsys.readouterr().err

    @pytest.mark.integration
    @pytest.mark.parametrize("argv", [["-b"], ["-e", "-d"]])
    def test_invalid_flag_combinations(self, argv):
        """Flags that only apply to the other mode are usage errors."""
        with pytest.raises(SystemExit) as excinfo:
            main(argv)
        assert excinfo.value.code == 2

    @pytest.mark.integration
    def test_version(self, capsys):
        """--version prints the program version."""
        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])
        assert excinfo.value.code == 0
        assert capsys.readouterr().out.startswith("cbd ")

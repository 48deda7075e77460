import pytest

import container
import huffman_tool
from errors import ResourceExhaustionError


@pytest.fixture
def dat_path(tmp_path):
    return str(tmp_path / "encoded.dat")


def _feed(monkeypatch, line):
    monkeypatch.setattr("builtins.input", lambda prompt="": line)


def test_no_mode_prints_usage(capsys):
    assert huffman_tool.main([]) == 0
    out = capsys.readouterr().out
    assert huffman_tool.BANNER in out
    assert "Please specify whether you want to decode or encode text" in out


def test_unknown_mode_is_noop(capsys, dat_path):
    assert huffman_tool.main(["compress", "--file", dat_path]) == 0
    assert "Unknown mode: compress" in capsys.readouterr().out


def test_encode_then_decode(monkeypatch, capsys, dat_path):
    _feed(monkeypatch, "aaabb")
    assert huffman_tool.main(["encode", "--file", dat_path]) == 0
    assert "Done" in capsys.readouterr().out
    with open(dat_path, encoding="utf-8") as f:
        assert f.read() == "2\n0=b\n1=a\n11100\n"

    assert huffman_tool.main(["decode", "--file", dat_path]) == 0
    assert "Decoded text: aaabb" in capsys.readouterr().out


def test_encode_empty_line(monkeypatch, capsys, dat_path):
    _feed(monkeypatch, "")
    assert huffman_tool.main(["encode", "--file", dat_path]) == 0
    assert "Got an empty string" in capsys.readouterr().out


def test_decode_corrupted_container(capsys, dat_path):
    container.save_container("2\n0=a\n0=b\n00\n", dat_path)
    assert huffman_tool.main(["decode", "--file", dat_path]) == 1
    out = capsys.readouterr().out
    assert "A fatal error occurred while doing the job:" in out
    assert "CorruptedDataError" in out
    assert "[Note]" not in out
    assert out.rstrip().endswith("Sorry")


def test_decode_missing_file(capsys, dat_path):
    assert huffman_tool.main(["decode", "--file", dat_path]) == 1
    assert "FileNotFoundError" in capsys.readouterr().out


def test_encode_resource_exhaustion_note(monkeypatch, capsys, dat_path):
    def exhausted(text):
        raise ResourceExhaustionError("too many symbols")
    monkeypatch.setattr(container, "build_code_table", exhausted)
    _feed(monkeypatch, "abc")
    assert huffman_tool.main(["encode", "--file", dat_path]) == 1
    out = capsys.readouterr().out
    assert "ResourceExhaustionError: too many symbols" in out
    assert "[Note]" in out


def test_encode_with_closed_stdin(monkeypatch, capsys, dat_path):
    def closed(prompt=""):
        raise EOFError("EOF when reading a line")
    monkeypatch.setattr("builtins.input", closed)
    assert huffman_tool.main(["encode", "--file", dat_path]) == 1
    out = capsys.readouterr().out
    assert "A fatal error occurred while doing the job:" in out
    assert "EmptyInputError" in out


def test_decode_invalid_utf8(capsys, dat_path):
    with open(dat_path, "wb") as f:
        f.write(b"1\n0=\xff\n0\n")
    assert huffman_tool.main(["decode", "--file", dat_path]) == 1
    out = capsys.readouterr().out
    assert "MalformedContainerError" in out
    assert out.rstrip().endswith("Sorry")


def test_encode_lone_surrogate_keeps_existing_file(monkeypatch, capsys, dat_path):
    container.save_container("prior", dat_path)
    _feed(monkeypatch, "a\udcffb")
    assert huffman_tool.main(["encode", "--file", dat_path]) == 1
    assert "UnsupportedSymbolError" in capsys.readouterr().out
    with open(dat_path, encoding="utf-8") as f:
        assert f.read() == "prior"

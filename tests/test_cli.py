# file: tests/test_cli.py

"""
Tests for the command line front end.
"""

import io
import json

import pytest

from cipherchain import Direction
from cipherchain.cli import main, parse_module_spec


class TestModuleSpec:

    def test_kind_only(self):
        module = parse_module_spec("reverse")
        assert module.kind == "reverse"

    def test_params(self):
        module = parse_module_spec("enigma:rotors=IV II V,positions=QEV")
        assert module.config["rotors"] == "IV II V"
        assert module.config["positions"] == "QEV"

    def test_direction_and_enabled(self):
        module = parse_module_spec("vigenere:key=LEMON,direction=decode,enabled=false")
        assert module.direction is Direction.DECODE
        assert module.enabled is False


class TestMain:

    def test_encode(self, capsys):
        main(["-m", "caesar:shift=3", "-m", "reverse", "-t", "abc"])
        assert capsys.readouterr().out == "fed\n"

    def test_decode_runs_inverted_pipeline(self, capsys):
        main(["-d", "-m", "caesar:shift=3", "-m", "reverse", "-t", "fed"])
        assert capsys.readouterr().out == "abc\n"

    def test_stdin(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("Hello"))
        main(["-m", "rot13"])
        assert capsys.readouterr().out == "Uryyb\n"

    def test_file_io(self, tmp_path, capsys):
        source = tmp_path / "in.txt"
        target = tmp_path / "out.txt"
        source.write_text("hello", encoding="utf-8")
        main(["-m", "base64", "-i", str(source), "-o", str(target)])
        assert target.read_text(encoding="utf-8") == "aGVsbG8="
        assert capsys.readouterr().out == ""

    def test_save_and_load_pipeline(self, tmp_path, capsys):
        path = tmp_path / "pipeline.json"
        main(["-m", "caesar:shift=3", "-m", "reverse", "--save", str(path), "-t", "abc"])
        document = json.loads(path.read_text(encoding="utf-8"))
        assert [r["kind"] for r in document["modules"]] == ["caesar", "reverse"]
        capsys.readouterr()
        main(["-p", str(path), "-t", "abc"])
        assert capsys.readouterr().out == "fed\n"

    def test_stages(self, capsys):
        main(["--stages", "-m", "caesar:shift=3", "-m", "reverse", "-t", "abc"])
        err = capsys.readouterr().err
        assert "[0] Caesar Cipher" in err
        assert "'fed'" in err

    def test_list(self, capsys):
        main(["-l"])
        out = capsys.readouterr().out
        assert "enigma" in out
        assert "rotors='I II III'" in out
        assert "Total:" in out

    def test_stage_error_exits(self):
        with pytest.raises(SystemExit) as excinfo:
            main(["-m", "base64:direction=decode", "-t", "hello"])
        assert "Error at stage 0" in str(excinfo.value.code)
        assert "Base64" in str(excinfo.value.code)

    def test_unknown_kind_exits(self):
        with pytest.raises(SystemExit) as excinfo:
            main(["-m", "teleporter", "-t", "x"])
        assert "teleporter" in str(excinfo.value.code)

    def test_bad_option_exits(self):
        with pytest.raises(SystemExit) as excinfo:
            main(["-m", "caesar:shift", "-t", "x"])
        assert "key=value" in str(excinfo.value.code)

    def test_missing_input_file(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            main(["-m", "reverse", "-i", str(tmp_path / "missing.txt")])
        assert "not found" in str(excinfo.value.code)

    def test_verbose_logs(self, capsys):
        from cipherchain import log
        try:
            main(["-v", "-m", "reverse", "-t", "abc"])
        finally:
            log.set_verbose(False)
        assert "[INFO] Pipeline: reverse" in capsys.readouterr().err

import io
from pathlib import Path

import pytest

import main
from errors import ConfigError
from main import Config, MachineContext, process

ROOT = Path(__file__).resolve().parent.parent
SETTING = "* B Beta III IV I AXLE (HQ) (EX) (IP) (TR) (BY)"
CIPHER = "QVPQS OKOIL PUBKJ ZPISF XDW"


def run_script(lines, cfg=None):
    out = io.StringIO()
    process(MachineContext.from_file(None), lines, out, cfg or Config())
    return out.getvalue()


def test_process_script():
    out = run_script([SETTING + "\n", "FROM HIS SHOULDER HIAWATHA\n", "\n"])
    assert out == CIPHER + "\n\n"


def test_process_resets_on_each_setting_line():
    out = run_script([SETTING, "FROM HIS", SETTING, CIPHER])
    assert out.splitlines() == ["QVPQS OK", "FROMH ISSHO ULDER HIAWA THA"]


def test_process_block_size():
    out = run_script([SETTING, "FROMHIS"], Config(block=3))
    assert out == "QVP QSO K\n"


def test_process_echoes_leading_blank_lines():
    assert run_script(["", SETTING, "F"]) == "\nQ\n"


@pytest.mark.parametrize("lines", [[], ["HELLO", SETTING], ["", ""]])
def test_process_missing_setting(lines):
    with pytest.raises(ConfigError, match="missing setting"):
        run_script(lines)


def test_context_rewind_round_trip():
    ctx = MachineContext.from_file(ROOT / "default.conf")
    ctx.setup(SETTING)
    cipher = ctx.encipher_block("HELLOWORLD")
    assert ctx.machine.positions != "AXLE"
    assert ctx.encipher_block(cipher) == "HELLOWORLD"


def test_context_rewind_without_setting():
    with pytest.raises(ConfigError):
        MachineContext.from_file(None).rewind()


def test_main_files(tmp_path):
    src = tmp_path / "msg.in"
    dst = tmp_path / "msg.out"
    src.write_text(f"{SETTING}\nFROM HIS SHOULDER HIAWATHA\n", encoding="utf-8")
    assert main.main([str(src), str(dst), "--config", str(ROOT / "default.conf")]) == 0
    assert dst.read_text(encoding="utf-8") == CIPHER + "\n"


def test_main_setting_flag_prefixes_script(tmp_path, capsys):
    src = tmp_path / "msg.in"
    src.write_text("FROM HIS SHOULDER HIAWATHA\n", encoding="utf-8")
    assert main.main([str(src), "--setting", SETTING]) == 0
    assert capsys.readouterr().out == CIPHER + "\n"


def test_main_one_shot(capsys):
    assert main.main(["-s", SETTING, "-m", "from his shoulder hiawatha"]) == 0
    assert capsys.readouterr().out == CIPHER + "\n"

    assert main.main(["-s", SETTING, "-m", CIPHER]) == 0
    assert capsys.readouterr().out == "FROMH ISSHO ULDER HIAWA THA\n"


def test_main_json_config(tmp_path, capsys):
    conf = tmp_path / "tiny.json"
    conf.write_text(
        '{"alphabet": "ABCD", "slots": 3, "pawls": 1, "rotors": ['
        '{"name": "R", "type": "R", "cycles": "(AC)(BD)"},'
        '{"name": "F", "type": "N"},'
        '{"name": "M", "type": "MA", "cycles": "(ABCD)"}]}',
        encoding="utf-8",
    )
    assert main.main(["-c", str(conf), "-s", "* R F M AA", "-m", "AAAA"]) == 0
    cipher = capsys.readouterr().out.strip()
    assert len(cipher) == 4
    assert main.main(["-c", str(conf), "-s", "* R F M AA", "-m", cipher]) == 0
    assert capsys.readouterr().out.strip() == "AAAA"


@pytest.mark.parametrize(
    "argv",
    [
        ["-m", "HELLO"],                                   # no setting
        ["-s", "* B Beta III IV I AXL", "-m", "HELLO"],    # short setting
        ["-s", "* B Beta III IV V I AXLE", "-m", "HI"],    # too many rotors
        ["-s", SETTING, "-m", "HI", "--block", "0"],
        ["does-not-exist.in"],
        ["-c", "does-not-exist.conf", "-s", SETTING, "-m", "HI"],
    ],
)
def test_main_errors(argv, capsys):
    assert main.main(argv) == 1
    assert capsys.readouterr().err.startswith("Error: ")


def test_main_debug_flag(capsys, caplog, quiet_debug):
    assert main.main(["-s", SETTING, "-m", "F", "--debug", "encipher"]) == 0
    assert quiet_debug.status()["encipher"]
    assert "[ENCIPHER] F -> Q" in caplog.text


def test_main_one_shot_lowercase_alphabet(tmp_path, capsys):
    conf = tmp_path / "lower.conf"
    conf.write_text("abcd\n3 1\nR R (ac) (bd)\nF N\nM Ma (abcd)\n", encoding="utf-8")
    assert main.main(["-c", str(conf), "-s", "* R F M aa", "-m", "abba"]) == 0
    cipher = capsys.readouterr().out.strip()
    assert len(cipher) == 4
    assert set(cipher) <= set("abcd")

    assert main.main(["-c", str(conf), "-s", "* R F M aa", "-m", cipher]) == 0
    assert capsys.readouterr().out.strip() == "abba"


@pytest.mark.parametrize(
    "name, content",
    [
        ("slots.json", b'{"alphabet": "AB", "slots": "three", "pawls": 1, "rotors": []}'),
        ("list.json", b'["alphabet", "slots"]'),
        ("entry.json", b'{"alphabet": "AB", "slots": 3, "pawls": 1, "rotors": [42]}'),
        ("latin.conf", b"AB\xff\n3 1\n"),
        ("latin.json", b'{"alphabet": "\xff"}'),
    ],
)
def test_main_bad_config_files(tmp_path, capsys, name, content):
    conf = tmp_path / name
    conf.write_bytes(content)
    assert main.main(["-c", str(conf), "-s", SETTING, "-m", "HI"]) == 1
    assert capsys.readouterr().err.startswith("Error: ")


def test_main_script_not_utf8(tmp_path, capsys):
    src = tmp_path / "msg.in"
    src.write_bytes(SETTING.encode() + b"\nFROM \xff\n")
    assert main.main([str(src)]) == 1
    assert capsys.readouterr().err.startswith("Error: ")

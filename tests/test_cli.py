import io

from minehint.cli import main


def write_board(tmp_path, text):
    path = tmp_path / "board.txt"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_certain_moves_from_file(tmp_path, capsys):
    path = write_board(tmp_path, "...\n121\n")
    assert main([path]) == 0
    out = capsys.readouterr().out
    assert " 0 | F  S  F" in out
    assert "Found 1 safe cells and 2 mines." in out


def test_guess_with_probabilities(tmp_path, capsys):
    path = write_board(tmp_path, "1..\n...\n...\n")
    assert main([path, "--probabilities"]) == 0
    out = capsys.readouterr().out
    assert "No certain move." in out
    assert "(1, 1): 0.3333" in out


def test_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("0.\n..\n"))
    assert main([]) == 0
    assert "Found 3 safe cells and 0 mines." in capsys.readouterr().out


def test_reports_skipped_components(tmp_path, capsys):
    path = write_board(tmp_path, "1..\n...\n...\n")
    assert main([path, "--max-component-size", "2"]) == 0
    assert "Skipped (component too large)" in capsys.readouterr().out


def test_invalid_board(tmp_path, capsys):
    path = write_board(tmp_path, "1x\n")
    assert main([path]) == 2
    assert "error:" in capsys.readouterr().err


def test_invalid_option(tmp_path, capsys):
    path = write_board(tmp_path, "1.\n")
    assert main([path, "--jobs", "0"]) == 2


def test_heatmap_is_written(tmp_path):
    path = write_board(tmp_path, "1..\n...\n...\n")
    image = tmp_path / "heatmap.png"
    assert main([path, "--heatmap", str(image)]) == 0
    assert image.exists()


def test_strict_mode_reports_oversized_component(tmp_path, capsys):
    path = write_board(tmp_path, "1..\n...\n...\n")
    assert main([path, "--max-component-size", "2", "--strict"]) == 1
    assert capsys.readouterr().err.startswith("error:")


def test_missing_board_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.txt")]) == 2
    assert capsys.readouterr().err.startswith("error: cannot read board")


def test_undecodable_board_file(tmp_path, capsys):
    path = tmp_path / "board.bin"
    path.write_bytes(b"\xff\xfe\x00")
    assert main([str(path)]) == 2
    assert "error:" in capsys.readouterr().err

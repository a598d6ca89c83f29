import os

import churn
import main_c
import main_e
import perf


def test_compress_then_expand_files(tmp_path, capsys):
    original = tmp_path / "story.txt"
    original.write_bytes(b"It was a dark and stormy night. " * 64)
    packed = tmp_path / "story.cmp"
    restored = tmp_path / "story.out"

    assert main_c.main(["huff-c", str(original), str(packed)]) == 0
    out = capsys.readouterr().out
    assert "Compression ratio:" in out
    assert "CompressFile" in out

    assert main_e.main(["huff-e", str(packed), str(restored)]) == 0
    assert restored.read_bytes() == original.read_bytes()
    assert packed.stat().st_size < original.stat().st_size


def test_usage_when_arguments_missing(capsys):
    assert main_c.main(["/usr/bin/huff-c.py"]) == 0
    assert "Usage:  huff-c infile outfile" in capsys.readouterr().out


def test_missing_input_file(tmp_path, capsys):
    missing = str(tmp_path / "nope.bin")
    assert main_c.main(["huff-c", missing, str(tmp_path / "out.cmp")]) == 1
    assert "not found" in capsys.readouterr().out


def test_expand_rejects_foreign_file(tmp_path, capsys):
    foreign = tmp_path / "foreign.bin"
    foreign.write_bytes(b"PK\x03\x04 not ours")
    assert main_e.main(["huff-e", str(foreign), str(tmp_path / "out.bin")]) == 1
    assert "invalid magic number" in capsys.readouterr().out


def test_compression_ratio_and_short_name():
    assert perf.compression_ratio(200, 50) == 75
    assert perf.compression_ratio(0, 6) == -500
    assert perf.short_name("C:\\tools\\huff-c.exe") == "huff-c"
    assert perf.short_name("huff") == "huff"


def test_churn_round_trips_a_tree(tmp_path):
    root = tmp_path / "data"
    (root / "nested").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"aaaaabbbbcccdde")
    (root / "empty.bin").write_bytes(b"")
    (root / "nested" / "bytes.bin").write_bytes(bytes(range(256)) * 2)
    (root / "skip.zip").write_bytes(b"already packed")
    work = tmp_path / "work"
    work.mkdir()

    program = churn.ChurnProgram(work_dir=str(work))
    assert program.main([str(root)]) == 0
    assert program.total_files == 3
    assert program.total_passed == 3

    log = (work / "CHURN.LOG").read_text(encoding="utf-8")
    assert log.count("Passed") == 3
    assert "skip.zip" not in log
    assert "Total failed:  0" in log
    assert os.path.exists(work / "TEST.OUT")


def test_churn_usage(capsys):
    assert churn.ChurnProgram().main([]) == 1
    assert "CHURN 1.0" in capsys.readouterr().out

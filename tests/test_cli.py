from umx.cli import main


def test_info(tmp_path, music_package, capsys):
    path = tmp_path / "song.umx"
    path.write_bytes(music_package)
    assert main(["info", str(path)]) == 0
    out = capsys.readouterr().out
    assert "Version: 69/0" in out
    assert "Song01" in out
    assert "Music" in out


def test_probe(tmp_path, music_package, capsys):
    good = tmp_path / "song.umx"
    good.write_bytes(music_package)
    bad = tmp_path / "junk.bin"
    bad.write_bytes(b"\x00" * 100)

    assert main(["probe", str(good)]) == 0
    assert main(["probe", str(good), "--require", "sound"]) == 1
    assert main(["probe", str(good), str(bad)]) == 1
    out = capsys.readouterr().out
    assert f"{bad}: failure" in out


def test_extract(tmp_path, music_package, it_payload):
    path = tmp_path / "song.umx"
    path.write_bytes(music_package)
    out_dir = tmp_path / "out"
    assert main(["extract", str(path), "-o", str(out_dir)]) == 0
    assert (out_dir / "Song01.it").read_bytes() == it_payload


def test_extract_unreadable(tmp_path):
    path = tmp_path / "junk.umx"
    path.write_bytes(b"junk")
    assert main(["extract", str(path), "-o", str(tmp_path / "out")]) == 1

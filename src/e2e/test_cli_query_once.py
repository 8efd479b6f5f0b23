import json
from pathlib import Path

import pytest
from tinysearch.__main__ import main

def _seed(tmp: Path) -> str:
    p = tmp / "index.json"
    p.write_text(json.dumps([
        {"title": "Intro to Rust", "body": "...", "url": "/a"},
        {"title": "Cooking", "body": "We used Rust-colored paint", "url": "/b"},
    ]), encoding="utf-8")
    return str(p)

@pytest.mark.e2e
def test_cli_json_output(tmp_path: Path, capsys):
    assert main(["--index", _seed(tmp_path), "--q", "rust", "--json"]) == 0
    rows = json.loads(capsys.readouterr().out)
    assert [r["href"] for r in rows] == ["/a?q=rust", "/b?q=rust"]

@pytest.mark.e2e
def test_cli_table_and_no_results(tmp_path: Path, capsys):
    idx = _seed(tmp_path)
    main(["--index", idx, "--q", "cooking"])
    assert "/b?q=cooking" in capsys.readouterr().out
    main(["--index", idx, "--q", "zzz"])
    assert "(no results)" in capsys.readouterr().out

@pytest.mark.e2e
def test_cli_missing_index_is_a_usage_error(tmp_path: Path):
    with pytest.raises(SystemExit) as exc:
        main(["--index", str(tmp_path / "nope.json"), "--q", "x"])
    assert exc.value.code == 2

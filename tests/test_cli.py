import json
from pathlib import Path

import pytest

from blog_docs_index import cli

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _run(argv):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    return excinfo.value.code


def test_cli_parse_prints_record(capsys):
    code = _run(["parse", str(FIXTURES_DIR / "multimarkdown_sample.md"), "--format", "multimarkdown", "--base-url", "/b/"])
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["url"] == "/b/multimarkdown_sample"
    assert payload["sections"] == ["Section 1", "Sub-section", "Section 2"]


def test_cli_parse_reports_malformed_markup(tmp_path: Path, capsys):
    broken = tmp_path / "broken.md"
    broken.write_text("---\ntitle: <b>oops\n---\n", encoding="utf-8")
    code = _run(["parse", str(broken), "--id", "b"])
    assert code == 1
    assert capsys.readouterr().out.startswith("[parse] ")


def test_cli_metadata(capsys):
    code = _run(["metadata", str(FIXTURES_DIR / "front_matter_sample.md")])
    assert code == 0
    assert json.loads(capsys.readouterr().out)["tags"] == "tag | test"


def test_cli_extract_missing_source_dir(tmp_path: Path, capsys):
    code = _run(["extract", str(tmp_path / "nope"), "--quiet"])
    assert code == 2
    assert "[extract] Source directory not found" in capsys.readouterr().out


def test_cli_extract_writes_output(tmp_path: Path, capsys):
    source = tmp_path / "posts"
    source.mkdir()
    (source / "one.md").write_text((FIXTURES_DIR / "front_matter_sample.md").read_text(encoding="utf-8"), encoding="utf-8")
    output = tmp_path / "result.jsonl"

    code = _run(["extract", str(source), "--output", str(output), "--quiet"])
    assert code == 0
    assert "[extract] Extracted 1 documents (0 failed)." in capsys.readouterr().out
    assert json.loads(output.read_text(encoding="utf-8").strip())["url"] == "/blog/one"

from pathlib import Path

import pytest

import blog_docs_index.config as config_mod


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_load_config_defaults_without_files(tmp_path: Path):
    cfg = config_mod.load_config()
    assert cfg.site.base_url == "/blog"
    assert cfg.extract.format == "frontmatter"
    assert cfg.file_patterns() == ["**/*.md", "**/*.markdown"]


def test_load_config_merges_repo_base_and_local(monkeypatch, tmp_path: Path):
    _write(
        tmp_path / "config.yaml",
        """
site:
  base_url: "https://example.org/blog/"
extract:
  format: "html"
""".strip()
        + "\n",
    )
    _write(tmp_path / "config.local.yaml", "extract:\n  max_workers: 2\n")
    monkeypatch.setattr(config_mod, "_repo_root", lambda: tmp_path)

    cfg = config_mod.load_config()
    assert cfg.site.base_url == "https://example.org/blog"
    assert cfg.extract.format == "html"
    assert cfg.extract.max_workers == 2
    assert cfg.file_patterns() == ["**/*.html", "**/*.htm"]


def test_load_config_env_override_applies_after_local(monkeypatch, tmp_path: Path):
    _write(tmp_path / "config.yaml", "extract:\n  format: \"frontmatter\"\n")
    _write(tmp_path / "config.local.yaml", "extract:\n  format: \"html\"\n")
    env_cfg = tmp_path / "env.yaml"
    _write(env_cfg, "extract:\n  format: \"multimarkdown\"\n")
    monkeypatch.setenv("BLOG_DOCS_INDEX_CONFIG", str(env_cfg))

    cfg = config_mod.load_config()
    assert cfg.extract.format == "multimarkdown"


def test_load_config_explicit_path_has_highest_precedence(monkeypatch, tmp_path: Path):
    env_cfg = tmp_path / "env.yaml"
    explicit_cfg = tmp_path / "explicit.yaml"
    _write(env_cfg, "output:\n  documents_path: \"env.jsonl\"\n")
    _write(explicit_cfg, "output:\n  documents_path: \"explicit.jsonl\"\n")
    monkeypatch.setenv("BLOG_DOCS_INDEX_CONFIG", str(env_cfg))

    cfg = config_mod.load_config(explicit_cfg)
    assert cfg.output.documents_path == "explicit.jsonl"


def test_base_url_env_wins_over_files(monkeypatch, tmp_path: Path):
    _write(tmp_path / "config.yaml", "site:\n  base_url: \"/from-file\"\n")
    monkeypatch.setenv("BLOG_DOCS_INDEX_BASE_URL", "https://example.org/posts/")

    cfg = config_mod.load_config()
    assert cfg.site.base_url == "https://example.org/posts"


def test_load_config_rejects_unknown_keys(tmp_path: Path):
    _write(tmp_path / "config.yaml", "solr:\n  url: \"http://localhost:8983\"\n")
    with pytest.raises(ValueError, match="Unsupported config keys"):
        config_mod.load_config()


def test_load_config_rejects_non_mapping(tmp_path: Path):
    _write(tmp_path / "config.yaml", "- just\n- a list\n")
    with pytest.raises(ValueError, match="YAML mapping"):
        config_mod.load_config()


def test_load_config_rejects_unknown_format(tmp_path: Path):
    _write(tmp_path / "config.yaml", "extract:\n  format: \"rst\"\n")
    with pytest.raises(ValueError, match="Unsupported extract.format"):
        config_mod.load_config()


def test_merge_config_rejects_unknown_section_field():
    with pytest.raises(ValueError, match="Invalid config override"):
        config_mod.merge_config(config_mod.Config(), {"site": {"host": "x"}})


def test_config_signature_tracks_changes():
    base = config_mod.Config()
    same = config_mod.merge_config(base, {})
    changed = config_mod.merge_config(base, {"site": {"base_url": "/other"}})
    assert config_mod.config_signature(base) == config_mod.config_signature(same)
    assert config_mod.config_signature(base) != config_mod.config_signature(changed)

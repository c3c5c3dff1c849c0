"""Tests for binfetch.config."""

from pathlib import Path

import pytest

from binfetch.config import BinfetchConfig, InstallOptions, ToolEntry, split_repo


def test_install_options_defaults() -> None:
    options = InstallOptions()
    assert options.tag == "latest"
    assert options.platform is None
    assert options.arch is None
    assert options.cache is False
    assert options.chmod == "755"


def test_install_options_empty_values_fall_back() -> None:
    options = InstallOptions(tag="", chmod="")
    assert options.tag == "latest"
    assert options.chmod == "755"


def test_split_repo() -> None:
    assert split_repo("getnoops/ops") == ("getnoops", "ops")


@pytest.mark.parametrize("repo", ["ops", "/ops", "getnoops/", "a/b/c"])
def test_split_repo_rejects_malformed(repo: str) -> None:
    with pytest.raises(ValueError, match="owner/project"):
        split_repo(repo)


def test_load_from_file(tmp_path: Path) -> None:
    config_file = tmp_path / "binfetch.yaml"
    config_file.write_text(
        """
tool_cache_dir: ~/runner/tools
cache_dir: /var/cache/binfetch
max_retries: 5
tools:
  - repo: getnoops/ops
    tag: v1.2.3
    cache: enable
  - repo: cli/cli
    arch: arm64
    chmod: "700"
""",
    )

    config = BinfetchConfig.load_from_file(str(config_file))

    assert config.tool_cache_dir == Path.home() / "runner" / "tools"
    assert config.cache_dir == Path("/var/cache/binfetch")
    assert config.max_retries == 5
    assert [t.repo for t in config.tools] == ["getnoops/ops", "cli/cli"]
    ops, gh = config.tools
    assert ops.options == InstallOptions(tag="v1.2.3", cache=True)
    assert gh.options == InstallOptions(arch="arm64", chmod="700")


def test_load_from_missing_file(tmp_path: Path) -> None:
    config = BinfetchConfig.load_from_file(str(tmp_path / "nope.yaml"))
    assert config == BinfetchConfig()


def test_load_from_invalid_yaml(tmp_path: Path) -> None:
    config_file = tmp_path / "binfetch.yaml"
    config_file.write_text("tools: [unclosed")
    assert BinfetchConfig.load_from_file(str(config_file)) == BinfetchConfig()


def test_load_with_unknown_key(tmp_path: Path) -> None:
    config_file = tmp_path / "binfetch.yaml"
    config_file.write_text("not_a_setting: 1\n")
    assert BinfetchConfig.load_from_file(str(config_file)) == BinfetchConfig()


def test_apply_environment(tmp_path: Path) -> None:
    env = {
        "GITHUB_TOKEN": "s3cret",
        "RUNNER_TOOL_CACHE": str(tmp_path / "toolcache"),
        "GITHUB_PATH": str(tmp_path / "path.txt"),
    }
    config = BinfetchConfig(token="from-file").apply_environment(env)
    assert config.token == "s3cret"
    assert config.tool_cache_dir == tmp_path / "toolcache"
    assert config.github_path == tmp_path / "path.txt"


def test_apply_empty_environment_keeps_settings() -> None:
    config = BinfetchConfig(token="from-file").apply_environment({})
    assert config.token == "from-file"
    assert config.github_path is None
    assert config.tool_cache_dir == BinfetchConfig().tool_cache_dir


def test_validate_warns_about_default_tool_cache(capsys: pytest.CaptureFixture[str]) -> None:
    BinfetchConfig().validate()
    assert "RUNNER_TOOL_CACHE" in capsys.readouterr().out


def test_validate_clamps_negative_retries(tmp_path: Path) -> None:
    config = BinfetchConfig(tool_cache_dir=tmp_path, max_retries=-1)
    config.validate()
    assert config.max_retries == 0


def test_tool_entry_from_dict() -> None:
    entry = ToolEntry.from_dict({"repo": "getnoops/ops", "cache": "true", "platform": "darwin"})
    assert entry.owner == "getnoops"
    assert entry.project == "ops"
    assert entry.options.cache is True
    assert entry.options.platform == "darwin"

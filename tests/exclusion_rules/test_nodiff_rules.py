"""Unit tests for nodiff exclusion rules."""

import threading
from pathlib import Path

import pytest

from fimdiff.exceptions import ConfigError, InvalidPatternError
from fimdiff.exclusion_rules.base_rules import BaseExclusionRules
from fimdiff.exclusion_rules.matchers import LiteralMatcher, RegexMatcher, compile_matcher
from fimdiff.exclusion_rules.nodiff_rules import (
    NodiffConfig,
    NodiffRulesBuilder,
    is_excluded,
    load_nodiff_config,
)


@pytest.fixture
def config(syscheck_conf):
    return load_nodiff_config(syscheck_conf)


@pytest.mark.parametrize(
    "path,expected",
    [
        # Literal entry
        ("/etc/ssl/private.key", True),
        ("/dummy_file.key", False),
        # Simple regex entry
        ("file.test", True),
        ("test.file", False),
        # No implicit prefix/suffix wildcarding for literals
        ("/etc/ssl/private.key.bak", False),
        ("/chroot/etc/ssl/private.key", False),
        # Literal comparison is case-sensitive
        ("/etc/ssl/PRIVATE.key", False),
        ("", False),
    ],
)
def test_is_excluded_with_loaded_config(config, path, expected):
    assert is_excluded(path, config) == expected, f"Failed for path: {path}"


def test_no_nodiff_configured():
    """Nothing is excluded when no entries are configured at all."""
    assert not is_excluded("test.file", NodiffConfig())
    assert not is_excluded("/etc/ssl/private.key", NodiffConfig())
    assert not is_excluded("", NodiffConfig())


def test_absent_config():
    assert not is_excluded("/etc/ssl/private.key", None)


def test_absent_collections():
    """Both collections absent behaves like nothing configured."""
    config = NodiffConfig(literal_paths=None, patterns=None)  # type: ignore[arg-type]
    assert not is_excluded("test.file", config)
    assert not is_excluded("/etc/ssl/private.key", config)
    assert not config.has_rules()
    assert list(config.matchers()) == []


def test_absent_patterns_with_literals():
    config = NodiffConfig(literal_paths=("/etc/shadow",), patterns=None)  # type: ignore[arg-type]
    assert is_excluded("/etc/shadow", config)
    assert not is_excluded("/etc/passwd", config)


def test_every_literal_is_excluded():
    literals = ("/etc/shadow", "/etc/gshadow", "/root/.ssh/id_rsa")
    config = NodiffConfig(literal_paths=literals)
    assert all(is_excluded(path, config) for path in literals)


def test_pattern_only_config():
    config = NodiffConfig(patterns=(compile_matcher(".pem$"), compile_matcher(r"/secrets?/", "pcre2")))
    assert is_excluded("/etc/ssl/server.pem", config)
    assert is_excluded("/srv/secret/token", config)
    assert not is_excluded("/etc/ssl/server.crt", config)


def test_literal_and_pattern_both_matching():
    config = NodiffConfig(literal_paths=("/etc/ssl/private.key",), patterns=(compile_matcher(".key$"),))
    assert is_excluded("/etc/ssl/private.key", config)


def test_matchers_are_tagged_in_order():
    config = NodiffConfig(literal_paths=("/a", "/b"), patterns=(compile_matcher("^/c", "pcre2"),))
    matchers = list(config.matchers())
    assert matchers == [LiteralMatcher("/a"), LiteralMatcher("/b"), RegexMatcher("^/c")]


def test_config_is_frozen():
    config = NodiffConfig(literal_paths=("/etc/shadow",))
    with pytest.raises(AttributeError):
        config.literal_paths = ()  # type: ignore[misc]
    with pytest.raises(NotImplementedError):
        config.add_rule("/etc/passwd")
    with pytest.raises(NotImplementedError):
        config.load_rules("ossec.conf")


def test_config_has_rules():
    assert not NodiffConfig().has_rules()
    assert NodiffConfig(literal_paths=("/etc/shadow",)).has_rules()
    assert NodiffConfig(patterns=(compile_matcher(".key$"),)).has_rules()


def test_config_implements_exclusion_interface(config):
    assert isinstance(config, BaseExclusionRules)
    assert config.exclude("/etc/ssl/private.key")
    assert not config.exclude("/dummy_file.key")


def test_concurrent_queries(config):
    """A frozen configuration can be queried from several threads at once."""
    paths = ["/etc/ssl/private.key", "/dummy_file.key", "file.test", "test.file"] * 250
    expected = [is_excluded(path, config) for path in paths]
    results = {}

    def worker(index):
        results[index] = [is_excluded(path, config) for path in paths]

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert all(result == expected for result in results.values())


class TestNodiffRulesBuilder:
    def test_empty_builder(self):
        builder = NodiffRulesBuilder()
        assert not builder.has_rules()
        assert not builder.exclude("/etc/ssl/private.key")
        assert builder.build() == NodiffConfig()

    def test_add_rule_and_pattern(self):
        builder = NodiffRulesBuilder()
        builder.add_rule("/etc/ssl/private.key")
        builder.add_pattern(".test$")

        assert builder.has_rules()
        assert builder.exclude("/etc/ssl/private.key")
        assert builder.exclude("file.test")
        assert not builder.exclude("test.file")

    def test_add_pattern_literal_kind(self):
        builder = NodiffRulesBuilder()
        builder.add_pattern("/etc/shadow", "literal")
        config = builder.build()
        assert config.literal_paths == ("/etc/shadow",)
        assert config.patterns == ()

    def test_invalid_pattern_is_reported_when_added(self):
        builder = NodiffRulesBuilder()
        with pytest.raises(InvalidPatternError):
            builder.add_pattern("(unclosed", "pcre2")
        assert not builder.has_rules()

    def test_build_snapshot_is_independent(self):
        builder = NodiffRulesBuilder()
        builder.add_rule("/etc/shadow")
        config = builder.build()
        builder.add_rule("/etc/passwd")

        assert config.exclude("/etc/shadow")
        assert not config.exclude("/etc/passwd")
        assert builder.exclude("/etc/passwd")

    def test_load_from_file(self, syscheck_conf):
        config = NodiffRulesBuilder(syscheck_conf).build()
        assert config.literal_paths == ("/etc/ssl/private.key",)
        assert [matcher.expression for matcher in config.patterns] == [".test$"]

    def test_load_from_str_path(self, syscheck_conf):
        config = NodiffRulesBuilder(str(syscheck_conf)).build()
        assert config.exclude("file.test")

    def test_load_multiple_files(self, syscheck_conf, tmp_path):
        extra = tmp_path / "extra.conf"
        extra.write_text('<syscheck><nodiff type="pcre2">\\.pem$</nodiff></syscheck>')

        config = load_nodiff_config([syscheck_conf, extra])
        assert config.exclude("/etc/ssl/private.key")
        assert config.exclude("file.test")
        assert config.exclude("/etc/ssl/server.pem")

    def test_load_incrementally(self, syscheck_conf, tmp_path):
        builder = NodiffRulesBuilder()
        builder.add_rule("/etc/shadow")
        builder.load_rules(syscheck_conf)

        assert builder.build().literal_paths == ("/etc/shadow", "/etc/ssl/private.key")

    def test_load_nonexistent_file(self):
        with pytest.raises(FileNotFoundError):
            NodiffRulesBuilder("nonexistent_file.conf")

    def test_load_invalid_pattern_names_source(self, tmp_path):
        conf = tmp_path / "bad.conf"
        conf.write_text('<syscheck><nodiff type="pcre2">(unclosed</nodiff></syscheck>')

        with pytest.raises(InvalidPatternError) as exc_info:
            load_nodiff_config(conf)
        assert exc_info.value.source == str(conf)
        assert str(conf) in str(exc_info.value)

    def test_load_malformed_file(self, tmp_path):
        conf = tmp_path / "bad.conf"
        conf.write_text("<syscheck><nodiff>/etc/shadow</syscheck>")

        with pytest.raises(ConfigError):
            load_nodiff_config(Path(conf))

"""Tests for ParseConfig, SerializeConfig and the parse config context."""

import threading

import pytest

from footmark import (
    ConfigError,
    ParseConfig,
    SerializeConfig,
    get_parse_config,
    parse,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)


class TestParseConfig:
    """Test ParseConfig defaults and validation."""

    def test_defaults(self) -> None:
        config = ParseConfig()
        assert config.footnotes_enabled is False
        assert config.max_label_length == 999

    @pytest.mark.parametrize("length", [0, -1])
    def test_label_length_must_be_positive(self, length: int) -> None:
        with pytest.raises(ConfigError, match="max_label_length"):
            ParseConfig(max_label_length=length)

    def test_from_dict_ignores_unknown_keys(self) -> None:
        config = ParseConfig.from_dict({"footnotes_enabled": True, "gfm": True})
        assert config == ParseConfig(footnotes_enabled=True)

    def test_immutable(self) -> None:
        config = ParseConfig()
        with pytest.raises(AttributeError):
            config.footnotes_enabled = True  # type: ignore[misc]

    def test_short_label_limit(self) -> None:
        doc = parse("[^abc] [^ab]", config=ParseConfig(max_label_length=2))
        (para,) = doc.children
        assert [type(child).__name__ for child in para.children] == [
            "Text",
            "FootnoteReference",
        ]


class TestSerializeConfig:
    """Test SerializeConfig validation."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"bullet": "x"},
            {"bullet_other": "."},
            {"bullet": "-", "bullet_other": "-"},
            {"fence": "'"},
            {"rule": "="},
        ],
    )
    def test_invalid_values(self, kwargs: dict) -> None:
        with pytest.raises(ConfigError):
            SerializeConfig(**kwargs)

    def test_bullets_must_differ(self) -> None:
        with pytest.raises(ConfigError, match="must differ"):
            SerializeConfig(bullet="*", bullet_other="*")

    def test_from_dict(self) -> None:
        config = SerializeConfig.from_dict({"rule": "_", "unknown": 1})
        assert config.rule == "_"
        assert config.bullet == "*"


class TestParseConfigContext:
    """Test the ContextVar holding the active parse config."""

    def test_default(self) -> None:
        assert get_parse_config() == ParseConfig()

    def test_set_and_reset(self) -> None:
        set_parse_config(ParseConfig(footnotes_enabled=True))
        try:
            assert get_parse_config().footnotes_enabled
        finally:
            reset_parse_config()
        assert get_parse_config() == ParseConfig()

    def test_context_restores_previous(self) -> None:
        outer = ParseConfig(max_label_length=10)
        with parse_config_context(outer):
            with parse_config_context(ParseConfig(footnotes_enabled=True)):
                assert get_parse_config().footnotes_enabled
            assert get_parse_config() is outer
        assert get_parse_config() == ParseConfig()

    def test_context_restores_after_exception(self) -> None:
        with pytest.raises(RuntimeError), parse_config_context(ParseConfig(footnotes_enabled=True)):
            raise RuntimeError("boom")
        assert not get_parse_config().footnotes_enabled

    def test_parse_leaves_config_untouched(self) -> None:
        parse("[^a]")
        assert get_parse_config() == ParseConfig()

    def test_threads_do_not_share_config(self) -> None:
        seen: list[bool] = []

        def worker() -> None:
            seen.append(get_parse_config().footnotes_enabled)

        with parse_config_context(ParseConfig(footnotes_enabled=True)):
            thread = threading.Thread(target=worker)
            thread.start()
            thread.join()
        assert seen == [False]

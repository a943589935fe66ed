"""Tests for locale_utils: Locale values, normalization and current-locale lookup.

Python 3.11+.
"""

import logging
import threading
from unittest.mock import patch

import pytest
from babel import Locale as BabelLocale
from babel import UnknownLocaleError
from hypothesis import given
from hypothesis import strategies as st

from localetext import locale_utils
from localetext.constants import DEFAULT_LOCALE
from localetext.indexing import group_by_label
from localetext.locale_utils import (
    Locale,
    clear_locale_cache,
    current_locale,
    get_babel_locale,
    get_system_locale,
    normalize_locale,
    set_locale_provider,
    use_locale,
)
from localetext.ordering import sort_with_locale


class TestNormalizeLocale:
    """Test normalize_locale function."""

    def test_bcp47_to_posix(self) -> None:
        """BCP-47 hyphens become underscores."""
        assert normalize_locale("en-US") == "en_US"

    def test_already_normalized(self) -> None:
        """POSIX codes pass through."""
        assert normalize_locale("en_US") == "en_US"

    def test_encoding_suffix_stripped(self) -> None:
        """Encoding suffix is removed."""
        assert normalize_locale("de_DE.UTF-8") == "de_DE"

    def test_modifier_stripped(self) -> None:
        """Modifier suffix is removed."""
        assert normalize_locale("ca_ES@valencia") == "ca_ES"

    def test_script_subtag(self) -> None:
        """Every hyphen is converted."""
        assert normalize_locale("zh-Hans-CN") == "zh_Hans_CN"


class TestLocale:
    """Test the Locale value type."""

    def test_components_normalized(self) -> None:
        """Language lowercased, region uppercased, script title-cased."""
        locale = Locale("EN", "us", "LATN")
        assert locale.language == "en"
        assert locale.region == "US"
        assert locale.script == "Latn"

    def test_empty_components_absent(self) -> None:
        """Empty region and script are stored as None."""
        assert Locale("en", "", "") == Locale("en")

    def test_str_is_posix_identifier(self) -> None:
        """str() joins language, script and region with underscores."""
        assert str(Locale("en", "US")) == "en_US"
        assert str(Locale("sr", "RS", "Latn")) == "sr_Latn_RS"
        assert str(Locale("fr")) == "fr"

    def test_frozen(self) -> None:
        """Locale is immutable."""
        locale = Locale("en")
        with pytest.raises(AttributeError):
            locale.language = "de"  # type: ignore[misc]

    def test_hashable_and_equal(self) -> None:
        """Equal locales hash equally."""
        assert {Locale("en", "us"), Locale("EN", "US")} == {Locale("en", "US")}

    @pytest.mark.parametrize(
        ("identifier", "expected"),
        [
            ("en_US", Locale("en", "US")),
            ("en-US", Locale("en", "US")),
            ("pt_BR.UTF-8", Locale("pt", "BR")),
            ("zh-Hans-CN", Locale("zh", "CN", "Hans")),
            ("es-419", Locale("es", "419")),
            ("de", Locale("de")),
        ],
    )
    def test_parse(self, identifier: str, expected: Locale) -> None:
        """POSIX and BCP-47 identifiers parse to the same Locale."""
        assert Locale.parse(identifier) == expected

    @pytest.mark.parametrize("identifier", ["", "not a locale", "12_US", "en_US_x_y_z"])
    def test_parse_malformed(self, identifier: str) -> None:
        """Malformed identifiers raise ValueError."""
        with pytest.raises(ValueError):
            Locale.parse(identifier)

    def test_to_babel(self) -> None:
        """to_babel returns the CLDR-backed Babel locale."""
        babel_locale = Locale("de", "DE").to_babel()
        assert isinstance(babel_locale, BabelLocale)
        assert babel_locale.language == "de"
        assert babel_locale.territory == "DE"

    def test_to_babel_unknown(self) -> None:
        """Locales without CLDR data raise UnknownLocaleError."""
        with pytest.raises(UnknownLocaleError):
            Locale("qq", "ZZ").to_babel()

    @given(
        st.from_regex(r"[a-z]{2,3}", fullmatch=True),
        st.one_of(st.none(), st.from_regex(r"[A-Z]{2}|[0-9]{3}", fullmatch=True)),
    )
    def test_str_parse_roundtrip(self, language: str, region: str | None) -> None:
        """Locale.parse(str(locale)) recovers the locale."""
        locale = Locale(language, region)
        assert Locale.parse(str(locale)) == locale


class TestGetBabelLocale:
    """Test get_babel_locale caching."""

    def test_bcp47_format(self) -> None:
        """BCP-47 codes are accepted."""
        locale = get_babel_locale("en-US")
        assert locale.language == "en"
        assert locale.territory == "US"

    def test_cached(self) -> None:
        """Repeated calls return the same object."""
        assert get_babel_locale("fr_FR") is get_babel_locale("fr_FR")

    def test_clear_locale_cache(self) -> None:
        """clear_locale_cache empties the cache."""
        get_babel_locale("de_DE")
        clear_locale_cache()
        assert get_babel_locale.cache_info().currsize == 0


class TestGetSystemLocale:
    """Test system locale detection."""

    def test_os_locale_used_first(self) -> None:
        """locale.getlocale() wins when it reports a real locale."""
        with patch("locale.getlocale", return_value=("sv_SE", "UTF-8")):
            assert get_system_locale() == "sv_SE"

    @pytest.mark.parametrize("var", ["LC_ALL", "LC_MESSAGES", "LANG"])
    def test_environment_variables(self, monkeypatch: pytest.MonkeyPatch, var: str) -> None:
        """Environment variables are consulted when the OS locale is C."""
        for name in ("LC_ALL", "LC_MESSAGES", "LANG"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv(var, "nb_NO.UTF-8")
        with patch("locale.getlocale", return_value=("C", None)):
            assert get_system_locale() == "nb_NO"

    def test_posix_pseudo_locale_skipped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """C and POSIX values are ignored."""
        monkeypatch.setenv("LC_ALL", "POSIX")
        monkeypatch.setenv("LC_MESSAGES", "C.UTF-8")
        monkeypatch.setenv("LANG", "fi_FI.UTF-8")
        with patch("locale.getlocale", return_value=(None, None)):
            assert get_system_locale() == "fi_FI"

    def test_default_when_undetermined(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """DEFAULT_LOCALE is returned when nothing is set."""
        for name in ("LC_ALL", "LC_MESSAGES", "LANG"):
            monkeypatch.delenv(name, raising=False)
        with patch("locale.getlocale", return_value=(None, None)):
            assert get_system_locale() == DEFAULT_LOCALE

    def test_raise_on_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """raise_on_failure=True raises RuntimeError when nothing is set."""
        for name in ("LC_ALL", "LC_MESSAGES", "LANG"):
            monkeypatch.delenv(name, raising=False)
        with (
            patch("locale.getlocale", side_effect=ValueError("unknown locale")),
            pytest.raises(RuntimeError, match="Could not determine system locale"),
        ):
            get_system_locale(raise_on_failure=True)


class TestCurrentLocale:
    """Test current-locale resolution order."""

    def test_system_locale_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without override or provider, the system locale is used."""
        monkeypatch.setattr(locale_utils, "get_system_locale", lambda: "da_DK")
        assert current_locale() == Locale("da", "DK")

    def test_malformed_system_locale_uses_default(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A malformed system value falls back to DEFAULT_LOCALE with a warning."""
        monkeypatch.setattr(locale_utils, "get_system_locale", lambda: "!!")
        with caplog.at_level(logging.WARNING, logger="localetext.locale_utils"):
            assert current_locale() == Locale.parse(DEFAULT_LOCALE)
        assert any("malformed system locale" in record.getMessage() for record in caplog.records)

    def test_provider_string(self) -> None:
        """A provider returning a code is parsed."""
        set_locale_provider(lambda: "fr-FR")
        assert current_locale() == Locale("fr", "FR")

    def test_provider_locale(self) -> None:
        """A provider returning a Locale is used as is."""
        set_locale_provider(lambda: Locale("ja", "JP"))
        assert current_locale() == Locale("ja", "JP")

    def test_provider_unavailable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A provider returning None defers to the system locale."""
        monkeypatch.setattr(locale_utils, "get_system_locale", lambda: "it_IT")
        set_locale_provider(lambda: None)
        assert current_locale() == Locale("it", "IT")

    def test_provider_raises(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A provider that raises defers to the system locale with a warning."""

        def provider() -> str:
            raise RuntimeError("application context not ready")

        monkeypatch.setattr(locale_utils, "get_system_locale", lambda: "it_IT")
        set_locale_provider(provider)
        with caplog.at_level(logging.WARNING, logger="localetext.locale_utils"):
            assert current_locale() == Locale("it", "IT")
        assert any("provider failed" in record.getMessage() for record in caplog.records)

    def test_provider_raises_services_still_work(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Services reading the active locale survive a failing provider."""

        def provider() -> str:
            raise RuntimeError("application context not ready")

        monkeypatch.setattr(locale_utils, "get_system_locale", lambda: "en_US")
        set_locale_provider(provider)
        assert sort_with_locale(["b", "a"], str) == ["a", "b"]
        assert group_by_label(["bob", "7up"], str) == {"B": ["bob"], "#": ["7up"]}

    def test_provider_malformed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A malformed provider value defers to the system locale."""
        monkeypatch.setattr(locale_utils, "get_system_locale", lambda: "it_IT")
        set_locale_provider(lambda: "definitely not a locale")
        assert current_locale() == Locale("it", "IT")

    def test_set_locale_provider_returns_previous(self) -> None:
        """set_locale_provider returns the replaced provider."""

        def provider() -> str:
            return "en"

        assert set_locale_provider(provider) is None
        assert set_locale_provider(None) is provider

    def test_locale_change_visible_immediately(self) -> None:
        """The provider is read on every call, never cached."""
        active = ["de_DE"]
        set_locale_provider(lambda: active[0])
        assert current_locale() == Locale("de", "DE")
        active[0] = "nl_NL"
        assert current_locale() == Locale("nl", "NL")


class TestUseLocale:
    """Test the context-local locale override."""

    def test_override_wins_over_provider(self) -> None:
        """use_locale takes precedence over the provider."""
        set_locale_provider(lambda: "fr_FR")
        with use_locale("sv-SE") as active:
            assert active == Locale("sv", "SE")
            assert current_locale() == Locale("sv", "SE")
        assert current_locale() == Locale("fr", "FR")

    def test_nested_overrides(self) -> None:
        """Inner overrides are undone on exit."""
        with use_locale(Locale("de")):
            with use_locale(Locale("fr")):
                assert current_locale() == Locale("fr")
            assert current_locale() == Locale("de")

    def test_override_restored_on_error(self) -> None:
        """The override is undone when the block raises."""
        set_locale_provider(lambda: "pl_PL")
        with pytest.raises(KeyError), use_locale("cs_CZ"):
            raise KeyError("boom")
        assert current_locale() == Locale("pl", "PL")

    def test_malformed_override_raises(self) -> None:
        """use_locale rejects malformed codes up front."""
        with pytest.raises(ValueError), use_locale("?? nope"):
            pass

    def test_override_is_thread_local(self) -> None:
        """Another thread does not see this thread's override."""
        set_locale_provider(lambda: "fi_FI")
        seen: list[Locale] = []
        with use_locale("sv_SE"):
            worker = threading.Thread(target=lambda: seen.append(current_locale()))
            worker.start()
            worker.join()
            assert current_locale() == Locale("sv", "SE")
        assert seen == [Locale("fi", "FI")]

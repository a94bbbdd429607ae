"""Tests for wren.errors — exception hierarchy and error messages."""

from wren.errors import ConfigurationError, RecordCheckError, RuleSyntaxError, WrenError


class TestHierarchy:
    def test_configuration_error_is_wren_error(self) -> None:
        assert issubclass(ConfigurationError, WrenError)

    def test_rule_syntax_error_is_configuration_error(self) -> None:
        assert issubclass(RuleSyntaxError, ConfigurationError)

    def test_record_check_error_is_not_configuration_error(self) -> None:
        assert issubclass(RecordCheckError, WrenError)
        assert not issubclass(RecordCheckError, ConfigurationError)


class TestRuleSyntaxError:
    def test_attributes(self) -> None:
        err = RuleSyntaxError("email", "emial", "unknown rule")
        assert err.field == "email"
        assert err.rule == "emial"
        assert err.reason == "unknown rule"

    def test_message(self) -> None:
        err = RuleSyntaxError("email", "emial", "unknown rule")
        assert str(err) == "Invalid rule 'emial' for field 'email': unknown rule"


class TestPublicApi:
    def test_lazy_top_level_names(self) -> None:
        import wren

        assert wren.RuleSyntaxError is RuleSyntaxError
        assert wren.Validator.__name__ == "Validator"
        assert wren.ValidatorConfig.__name__ == "ValidatorConfig"
        assert wren.MemoryRecordChecker.__name__ == "MemoryRecordChecker"

    def test_unknown_attribute(self) -> None:
        import wren

        try:
            wren.nope  # noqa: B018
        except AttributeError as exc:
            assert "nope" in str(exc)
        else:
            raise AssertionError("expected AttributeError")

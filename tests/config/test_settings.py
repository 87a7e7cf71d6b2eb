import pytest
from payment_demo.exceptions import PaymentConfigurationError
from payment_demo.settings import Settings


# Fixture to provide a Settings instance for each test
@pytest.fixture
def settings():
    return Settings()


# --- Parameterized Tests for Simple Getters ---


@pytest.mark.parametrize(
    "env_var, method_name, test_value, expected_value",
    [
        # Env Var Name, Settings Method Name, Value to Set, Expected Return
        ("PAYMENT_PROCESSING_SECONDS", "get_processing_seconds", "3.5", 3.5),
        ("PAYMENT_RETRY_INTERVAL_SECONDS", "get_retry_interval_seconds", "0.25", 0.25),
        ("PAYMENT_MAX_PRESENTATION_ATTEMPTS", "get_max_presentation_attempts", "7", 7),
        ("PAYMENT_ANNOUNCE_DELAY_SECONDS", "get_announce_delay_seconds", "0", 0.0),
        ("PAYMENT_BANNER_SECONDS", "get_banner_seconds", "12", 12.0),
        ("LOG_LEVEL", "get_log_level", "debug", "DEBUG"),  # Should be uppercase
    ],
)
def test_getter_set(settings, monkeypatch, env_var, method_name, test_value, expected_value):
    """Test getters when the corresponding environment variable is set."""
    monkeypatch.setenv(env_var, test_value)
    getter_method = getattr(settings, method_name)
    assert getter_method() == expected_value


@pytest.mark.parametrize(
    "env_var, method_name, expected_default",
    [
        # Env Var Name, Settings Method Name, Expected Default Value
        ("PAYMENT_PROCESSING_SECONDS", "get_processing_seconds", 2.0),
        ("PAYMENT_RETRY_INTERVAL_SECONDS", "get_retry_interval_seconds", 0.5),
        ("PAYMENT_MAX_PRESENTATION_ATTEMPTS", "get_max_presentation_attempts", 20),
        ("PAYMENT_ANNOUNCE_DELAY_SECONDS", "get_announce_delay_seconds", 0.5),
        ("PAYMENT_BANNER_SECONDS", "get_banner_seconds", 8.0),
        ("LOG_LEVEL", "get_log_level", "INFO"),
    ],
)
def test_getter_defaults(settings, monkeypatch, env_var, method_name, expected_default):
    """Test getters return correct default values when env vars are not set."""
    monkeypatch.delenv(env_var, raising=False)
    getter_method = getattr(settings, method_name)
    assert getter_method() == expected_default


def test_blank_value_falls_back_to_default(settings, monkeypatch):
    monkeypatch.setenv("PAYMENT_PROCESSING_SECONDS", "  ")
    assert settings.get_processing_seconds() == Settings.DEFAULT_PROCESSING_SECONDS


def test_zero_attempts_means_unbounded(settings, monkeypatch):
    monkeypatch.setenv("PAYMENT_MAX_PRESENTATION_ATTEMPTS", "0")
    assert settings.get_max_presentation_attempts() is None


def test_log_level_custom_default(settings, monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    assert settings.get_log_level("debug") == "DEBUG"


# --- Invalid Values ---


@pytest.mark.parametrize(
    "env_var, method_name, bad_value, message",
    [
        ("PAYMENT_PROCESSING_SECONDS", "get_processing_seconds", "soon", "must be a number"),
        ("PAYMENT_RETRY_INTERVAL_SECONDS", "get_retry_interval_seconds", "-1", "must not be negative"),
        ("PAYMENT_BANNER_SECONDS", "get_banner_seconds", "eight", "must be a number"),
        ("PAYMENT_MAX_PRESENTATION_ATTEMPTS", "get_max_presentation_attempts", "2.5", "must be an integer"),
        ("PAYMENT_MAX_PRESENTATION_ATTEMPTS", "get_max_presentation_attempts", "-3", "must not be negative"),
    ],
)
def test_invalid_values_raise(settings, monkeypatch, env_var, method_name, bad_value, message):
    monkeypatch.setenv(env_var, bad_value)
    getter_method = getattr(settings, method_name)
    with pytest.raises(PaymentConfigurationError, match=message):
        getter_method()


def test_configuration_error_is_a_value_error(settings, monkeypatch):
    monkeypatch.setenv("PAYMENT_PROCESSING_SECONDS", "soon")
    with pytest.raises(ValueError):
        settings.get_processing_seconds()

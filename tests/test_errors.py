import pytest

from tftest.errors import (
    ErrorType,
    FrameworkError,
    assertion_error,
    config_error,
    internal_error,
    terraform_error,
    validation_error,
)

FACTORIES = [
    (config_error, ErrorType.CONFIG, "ConfigError"),
    (validation_error, ErrorType.VALIDATION, "ValidationError"),
    (terraform_error, ErrorType.TERRAFORM, "TerraformError"),
    (assertion_error, ErrorType.ASSERTION, "AssertionError"),
    (internal_error, ErrorType.INTERNAL, "InternalError"),
]


@pytest.mark.parametrize("factory, error_type, label", FACTORIES)
def test_factory_sets_type(factory, error_type, label):
    err = factory("something broke", None)
    direct = FrameworkError(error_type, "something broke", None)
    assert err.error_type is error_type
    assert err.message == "something broke"
    assert err.cause is None
    assert str(err) == f"{label}: something broke"
    assert str(direct) == str(err)


@pytest.mark.parametrize("factory, error_type, label", FACTORIES)
def test_factory_with_cause(factory, error_type, label):
    cause = OSError("disk full")
    err = factory("write failed", cause)
    direct = FrameworkError(error_type, "write failed", cause)
    assert err.cause is cause
    assert err.__cause__ is cause
    assert str(err) == f"{label}: write failed (cause: disk full)"
    assert str(direct) == str(err)


def test_cause_defaults_to_none():
    err = config_error("missing")
    assert err.cause is None
    assert str(err) == "ConfigError: missing"


def test_framework_error_can_be_raised_and_caught():
    err = terraform_error("apply failed", RuntimeError("exit status 1"))
    with pytest.raises(FrameworkError, match="TerraformError: apply failed") as excinfo:
        raise err
    assert excinfo.value is err
    assert err.error_type is ErrorType.TERRAFORM
    assert isinstance(err.cause, RuntimeError)
    assert str(err.cause) == "exit status 1"


def test_direct_construction():
    err = FrameworkError(ErrorType.VALIDATION, "bad input", None)
    assert str(err) == "ValidationError: bad input"
    assert err.args == ("bad input",)


def test_error_type_values():
    created = [
        config_error("x", None),
        validation_error("x", None),
        terraform_error("x", None),
        assertion_error("x", None),
        internal_error("x", None),
    ]
    assert [str(err.error_type) for err in created] == [
        "ConfigError",
        "ValidationError",
        "TerraformError",
        "AssertionError",
        "InternalError",
    ]
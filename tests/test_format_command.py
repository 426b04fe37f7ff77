import subprocess
from unittest import mock

import pytest

from tftest.errors import ErrorType, FrameworkError
from tftest.format_command import format_tests


@pytest.fixture
def module(tmp_path):
    (tmp_path / "examples").mkdir()
    (tmp_path / "tests").mkdir()
    return tmp_path


class FakeRun:
    """Records commands; results are chosen per command name."""

    def __init__(self, unformatted="", gofmt_rc=0, vet_rc=0):
        self.calls = []
        self.unformatted = unformatted
        self.gofmt_rc = gofmt_rc
        self.vet_rc = vet_rc

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs["cwd"]))
        if cmd[:2] == ["gofmt", "-l"]:
            return subprocess.CompletedProcess(cmd, self.gofmt_rc, stdout=self.unformatted)
        if cmd[0] == "go":
            return subprocess.CompletedProcess(cmd, self.vet_rc, stdout="vet output")
        return subprocess.CompletedProcess(cmd, 0)


def _patch(fake):
    return mock.patch("tftest.format_command.subprocess.run", side_effect=fake)


def test_nothing_selected_is_config_error(module):
    with pytest.raises(FrameworkError) as info:
        format_tests(str(module))
    assert info.value.error_type is ErrorType.CONFIG
    assert "--all, --example-path, or --common" in str(info.value)


def test_invalid_structure(tmp_path):
    with pytest.raises(FrameworkError, match="Invalid directory structure"):
        format_tests(str(tmp_path), all_examples=True)


def test_all_visits_examples_then_common_and_helpers(module):
    for name in ("b", "a"):
        (module / "examples" / name).mkdir()
        (module / "tests" / name).mkdir()
    (module / "tests" / "common").mkdir()
    (module / "tests" / "helpers").mkdir()
    fake = FakeRun()
    with _patch(fake):
        format_tests(str(module), all_examples=True)
    visited = [cwd for cmd, cwd in fake.calls if cmd[0] == "gofmt"]
    expected = [str(module / "tests" / n) for n in ("a", "b", "common", "helpers")]
    assert visited == expected
    assert all(cmd != ["gofmt", "-w", "."] for cmd, _ in fake.calls)


def test_all_with_missing_test_directory(module):
    (module / "examples" / "vpc").mkdir()
    fake = FakeRun()
    with _patch(fake):
        with pytest.raises(FrameworkError, match="Directory structure validation failed"):
            format_tests(str(module), all_examples=True)
    assert fake.calls == []


def test_issues_are_fixed(module, capsys):
    (module / "tests" / "common").mkdir()
    fake = FakeRun(unformatted="a_test.go\n")
    with _patch(fake):
        format_tests(str(module), common_only=True)
    commands = [cmd for cmd, _ in fake.calls]
    assert commands == [["gofmt", "-l", "."], ["gofmt", "-w", "."], ["go", "vet", "./..."]]
    out = capsys.readouterr().out
    assert "a_test.go" in out
    assert "Fixed formatting issues" in out
    assert "Format verification passed" in out


def test_vet_failure_fails_verification(module):
    (module / "tests" / "common").mkdir()
    with _patch(FakeRun(vet_rc=1)):
        with pytest.raises(FrameworkError) as info:
            format_tests(str(module), common_only=True)
    assert info.value.error_type is ErrorType.VALIDATION
    assert "Format verification failed" in str(info.value)


def test_gofmt_check_failure_skips_vet(module):
    (module / "tests" / "common").mkdir()
    fake = FakeRun(gofmt_rc=2)
    with _patch(fake):
        with pytest.raises(FrameworkError, match="Format verification failed"):
            format_tests(str(module), common_only=True)
    assert [cmd for cmd, _ in fake.calls] == [["gofmt", "-l", "."]]


def test_example_path_formats_only_that_example(module):
    (module / "examples" / "vpc").mkdir()
    (module / "tests" / "vpc").mkdir()
    (module / "tests" / "common").mkdir()
    fake = FakeRun()
    with _patch(fake):
        format_tests(str(module), example_path="vpc", common_only=True)
    assert {cwd for _, cwd in fake.calls} == {str(module / "tests" / "vpc")}


def test_example_path_missing_example(module):
    with pytest.raises(FrameworkError, match="Example directory not found"):
        format_tests(str(module), example_path="vpc")


def test_example_path_missing_tests(module):
    (module / "examples" / "vpc").mkdir()
    with pytest.raises(FrameworkError, match="Test directory for example vpc not found"):
        format_tests(str(module), example_path="vpc")


def test_common_missing(module):
    with pytest.raises(FrameworkError, match="Common test directory not found"):
        format_tests(str(module), common_only=True)
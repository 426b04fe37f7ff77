# tftest

Tools for testing Terraform modules: apply every example of a module, check
that a second plan shows no changes, and assert on outputs, state and files.
A `tftest` command runs and formats a module's Go test suites.

## Expected layout

```
my-module/
  examples/
    example-basic/
    example-advanced/
  tests/
    example-basic/
    example-advanced/
    common/     (optional)
    helpers/    (optional)
```

The runner in `tftest.runner` only picks up directories whose names start
with `example-`.

## Installation

```
pip install .
pip install ".[test]"    # with the test dependencies
```

The `terraform` binary must be on `PATH` for anything that applies examples
(the binary name can be changed with `TerraformOptions.binary`). The `tftest`
command also needs `go` and `gofmt` on `PATH`.

## Command line

```
tftest run                          # run all tests of the module in the current directory
tftest run --example-path vpc       # run the tests for one example
tftest run --common                 # run only the common tests
tftest run --module-root /path/to/module
tftest run --parallel-fixtures      # run test fixtures in parallel
tftest run --parallel-tests         # run tests within fixtures in parallel
tftest format --all                 # gofmt and go vet every example's test directory
tftest format --example-path vpc
tftest format --common
tftest version
tftest --version
tftest --verbose DEBUG run          # DEBUG, INFO, WARN, ERROR or FATAL
```

`--parallel-fixtures` and `--parallel-tests` also accept a value, for example
`--parallel-tests=true` or `--parallel-tests=false`.

`run` checks that `examples/` and `tests/` exist (and the chosen example or
`tests/common/`), then runs `go test <path> -v` in the module root, adding
`-p 1` unless `--parallel-fixtures` is given. It sets
`TERRATEST_DISABLE_PARALLEL_TESTS` to `true`, or to `false` with
`--parallel-tests`, for the tests it starts.

`format --all` requires a test directory for every directory under
`examples/`, and also formats `tests/common/` and `tests/helpers/` when they
exist. Each directory is checked with `gofmt -l`, fixed with `gofmt -w` when
needed, and checked with `go vet ./...`.

The command exits with status 1 when the layout is wrong or tests, formatting
or vetting fail. An unknown `--verbose` level prints a warning and falls back
to INFO.

## Library use

```python
from tftest.context import TestConfig
from tftest.runner import run_single_example, run_all_examples
from tftest import assertions

ctx = run_single_example(
    "path/to/module/examples",
    "example-basic",
    TestConfig(name="basic", extra_vars={"output_content": "Hello"}),
)
assertions.assert_output_equals(ctx, "output_content", "Hello")
assertions.assert_file_exists(ctx)

results = run_all_examples("path/to/module/examples", None)
```

- `tftest.runner.run_example` runs `terraform init` and `apply`, then, unless
  `TERRATEST_IDEMPOTENCY` is exactly `false`, runs `plan` and raises if the
  output does not say "No changes". Pass `register_cleanup` (for example
  pytest's `request.addfinalizer`) to have `destroy` scheduled.
- `run_all_examples` runs each configured `example-` directory, with default
  configs when none are given. Examples run in threads unless
  `TERRATEST_DISABLE_PARALLEL_TESTS` is `true` (any case). Every example is
  attempted; if any fail, one error naming them all is raised.
- `run_all_examples_with_tests`, `discover_and_run_all_tests` and
  `run_custom_tests` call your functions on each resulting `TestContext`.
- `run_single_example` accepts `"."` as the example name to use the root
  path itself.

Failures are raised as `tftest.errors.FrameworkError`, whose `error_type`
is an `ErrorType` (config, validation, terraform, assertion or internal).
The functions in `tftest.assertions` return `None` when they hold and raise
an assertion-type `FrameworkError` otherwise.

Other modules:

- `tftest.terraform` – `TerraformOptions` and `run_command`, `init_and_apply`,
  `plan`, `destroy`, `output`, `output_map`, `output_list`.
- `tftest.context` – `TestConfig`, `TestContext`, `new_test_context`,
  `discover_examples`, `idempotency_enabled`, `parallel_tests_enabled`.
- `tftest.idempotency` – `verify` (true when a plan prints nothing) and
  `verify_all`.
- `tftest.examples` – `find_all_examples` (every directory under `examples/`)
  and `configure_examples`.
- `tftest.benchmark` – `benchmark` and `BenchmarkSuite` to time steps and
  summarise them.
- `tftest.log` – `Logger`, `LogLevel`, `parse_log_level` and module-level
  logging functions.

## Limits

The `tftest` command does not run Python tests: `run` and `format` drive a
module's Go test suites through `go test`, `gofmt` and `go vet`.
"""
tiny test harness used by recordkit_tests.

    @test("group_by keeps input order")
    def test_group_order():
        assert_that(..., "message")

test modules end with `suite.run(title=...)` under __main__; running this file
directly imports every recordkit_tests/*_test.py and runs them as one suite.
the decorated functions stay plain functions, so pytest collects them too.
"""
import importlib.util
import sys
import time
import traceback
from functools import wraps
from pathlib import Path
from typing import List, Dict, Any, Callable, Type

_suite_state: Dict[str, List[Dict[str, Any]]] = {
    'tests': [],
    'results': []
}

PASS_MARK = '✔ pass'
FAIL_MARK = '✖ fail'


class _c:
    """a tiny, silent class for holding color codes."""
    ok = '\033[92m'
    fail = '\033[91m'
    warn = '\033[93m'
    info = '\033[94m'
    grey = '\033[90m'
    reset = '\033[0m'


class SuiteAssertionError(AssertionError):
    """distinguishes assertion failures from unexpected exceptions."""
    pass


# --- public api ---

def test(description: str) -> Callable:
    """decorator to register a function as a test case."""

    def decorator(func: Callable) -> Callable:
        _suite_state['tests'].append({'func': func, 'description': description})

        @wraps(func)
        def wrapper(*args, **kwargs):
            return func(*args, **kwargs)

        return wrapper

    return decorator


# test modules alias this as `test`; keep pytest from collecting the decorator itself
test.__test__ = False


def assert_that(condition: Any, message: str = "assertion failed") -> None:
    if not condition:
        raise SuiteAssertionError(message)


def assert_raises(expected: Type[BaseException], func: Callable, *args,
                  message: str = "", **kwargs) -> BaseException:
    """call func and require it to raise expected; returns the raised error for further checks."""
    try:
        func(*args, **kwargs)
    except expected as e:
        return e
    except Exception as e:
        raise SuiteAssertionError(
            f"expected {expected.__name__}, got {type(e).__name__}: {e}. {message}".strip())
    raise SuiteAssertionError(f"expected {expected.__name__} to be raised. {message}".strip())


def run(title: str = "test run", verbose: bool = False) -> bool:
    """executes all registered tests, prints a report and returns true when everything passed."""
    print(f"\n{_c.info}--- starting: {title} ---{_c.reset}")
    start_time = time.perf_counter()

    _suite_state['results'] = []

    for test_item in _suite_state['tests']:
        func = test_item['func']
        description = test_item['description']

        passed = False
        error = None

        try:
            func()
            passed = True
        except SuiteAssertionError as e:
            error = f"assertion failed: {e}"
        except Exception as e:
            error = f"{type(e).__name__}: {e}"
            if verbose:
                traceback.print_exc()

        _suite_state['results'].append({'passed': passed, 'description': description, 'error': error})

        if passed:
            print(f"  {_c.ok}{PASS_MARK}{_c.reset}  {description}")
        else:
            print(f"  {_c.fail}{FAIL_MARK}{_c.reset}  {description}")
            print(f"    {_c.grey}└─> {error}{_c.reset}")

    all_passed = _print_summary(start_time)

    # clear tests after run to allow for multiple, separate suite runs in a single script
    _suite_state['tests'] = []
    return all_passed


def _print_summary(start_time: float) -> bool:
    duration = (time.perf_counter() - start_time) * 1000
    results = _suite_state['results']

    total = len(results)
    passed_count = sum(1 for r in results if r['passed'])
    failed_count = total - passed_count

    summary_color = _c.ok if failed_count == 0 else _c.fail

    print(f"\n{summary_color}--- summary ---{_c.reset}")
    print(f"  ran {_c.info}{total}{_c.reset} tests in {_c.warn}{duration:.2f}ms{_c.reset}")
    print(f"  {_c.ok}passed: {passed_count}{_c.reset}, {_c.fail}failed: {failed_count}{_c.reset}")
    print(f"{summary_color}---------------{_c.reset}\n")
    return failed_count == 0


def run_directory(directory: Path) -> bool:
    """import every *_test.py module in directory and run each as its own suite."""
    all_passed = True
    for path in sorted(directory.glob('*_test.py')):
        spec = importlib.util.spec_from_file_location(path.stem, path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        all_passed = run(title=path.stem.replace('_', ' ')) and all_passed
    return all_passed


if __name__ == "__main__":
    here = Path(__file__).resolve().parent
    sys.path.insert(0, str(here))
    sys.exit(0 if run_directory(here / 'recordkit_tests') else 1)

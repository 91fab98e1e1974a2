import doctest
import sys
from pathlib import Path

# Relative to the working directory, run from the repository root
README_PATH = Path("README.md")


def _get_doctests(path: Path = README_PATH) -> doctest.DocTest:
    with open(path, "rb") as fobj:
        tests = doctest.DocTestParser().get_doctest(
            string=fobj.read().decode("utf8").replace("\r\n", "\n"),
            globs={},
            name="README",
            filename=str(path),
            lineno=0,
        )

    return tests


def _test(args: list[str] = sys.argv[1:], verbosity: bool = False) -> int:
    if verbosity == 0:
        print("Getting doctests...")

    path = Path(args[0]) if args else README_PATH
    tests = _get_doctests(path)

    runner = doctest.DocTestRunner(verbose=verbosity, optionflags=doctest.FAIL_FAST)

    if verbosity == 0:
        print(f"Running {len(tests.examples)} doctests...")
    failure_count, __test_count = runner.run(tests)

    # print results
    if verbosity:
        runner.summarize(True)
    else:
        if failure_count == 0:
            print("All test passed successfully")
        elif failure_count > 0:
            runner.summarize(verbosity)

    return failure_count

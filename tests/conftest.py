import pytest

from pbokit.reporting import SilentReporter, set_reporter, set_verbosity


@pytest.fixture(autouse=True)
def _silent_reporter():
    # Reporters bind to the stream current at creation; reset per test.
    set_reporter(SilentReporter())
    set_verbosity(0)
    yield
    set_reporter(SilentReporter())

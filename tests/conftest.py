import pytest

from malt.interpreter import Interpreter
from malt.runtime_context import wait_for_fibers


@pytest.fixture
def interp():
    return Interpreter()


@pytest.fixture(scope="module", autouse=True)
def _settle_fibers():
    # Fiber threads outlive the expression that spawned them; let them finish
    yield
    wait_for_fibers(timeout=10)

import random
import threading
from concurrent.futures import ThreadPoolExecutor

from gitbuilder.circuit import Circuit, CircuitState

NUM_CONCURRENTS = 1000


def test_open_close_serial():
    c = Circuit()
    assert c.state() == CircuitState.OPEN
    assert c.close() is True
    assert c.state() == CircuitState.CLOSED
    assert c.open() is True
    assert c.state() == CircuitState.OPEN


def test_repeated_transitions_report_false():
    c = Circuit()
    assert c.open() is False
    assert c.close() is True
    assert c.close() is False
    assert c.state() == CircuitState.CLOSED


def test_state_names():
    c = Circuit()
    assert str(c.state()) == "OPEN"
    c.close()
    assert str(c.state()) == "CLOSED"


def test_open_close_concurrent():
    c = Circuit()
    record = threading.Lock()
    last = [CircuitState.OPEN]
    choices = [random.Random(42 + i).randint(0, 1) for i in range(NUM_CONCURRENTS)]

    def worker(choice):
        with record:
            if choice == 0:
                c.open()
                last[0] = CircuitState.OPEN
            else:
                c.close()
                last[0] = CircuitState.CLOSED

    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(worker, choices))
    assert c.state() == last[0]
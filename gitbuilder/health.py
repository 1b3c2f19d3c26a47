"""Health checks for the builder: SSH server state and object storage."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from http import HTTPStatus
from typing import Any, Protocol

from gitbuilder.circuit import Circuit, CircuitState

WAIT_TIMEOUT = 10.0

log = logging.getLogger(__name__)


class HealthCheckError(Exception):
    """Raised when a health check finds the service unhealthy."""


class _BucketLister(Protocol):
    def list(self, path: str) -> Iterable[str] | None: ...


class _NamespaceLister(Protocol):
    def list(self) -> Any: ...


def list_buckets(lister: _BucketLister) -> list[str]:
    """Return the objects directly under the storage root."""
    return list(lister.list("/") or [])


def circuit_state(circuit: Circuit) -> None:
    """Raise HealthCheckError unless the SSH server's circuit is closed."""
    if circuit.state() != CircuitState.CLOSED:
        raise HealthCheckError("SSH Server is not yet started")


def list_namespaces(lister: _NamespaceLister) -> Any:
    """Return the namespaces reported by lister."""
    return lister.list()


def healthz(
    bucket_lister: _BucketLister, circuit: Circuit, timeout: float = WAIT_TIMEOUT
) -> HTTPStatus:
    """Run the health checks concurrently and return the HTTP status to report."""
    checks: dict[str, Callable[[], Any]] = {
        "getting server state": lambda: circuit_state(circuit),
        "listing buckets": lambda: list_buckets(bucket_lister),
    }
    executor = ThreadPoolExecutor(max_workers=len(checks))
    try:
        futures = {executor.submit(fn): label for label, fn in checks.items()}
        done, pending = wait(futures, timeout=timeout, return_when=FIRST_EXCEPTION)
        for future in done:
            exc = future.exception()
            if exc is not None:
                log.error("Healthcheck error %s (%s)", futures[future], exc)
                return HTTPStatus.SERVICE_UNAVAILABLE
        if pending:
            log.error("Healthcheck endpoint timed out after %ss", timeout)
            return HTTPStatus.SERVICE_UNAVAILABLE
        return HTTPStatus.OK
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def make_healthz_app(bucket_lister: _BucketLister, circuit: Circuit) -> Callable:
    """Return a WSGI application serving the health check at /healthz."""

    def app(environ: dict, start_response: Callable) -> list[bytes]:
        if environ.get("PATH_INFO", "") != "/healthz":
            status = HTTPStatus.NOT_FOUND
        else:
            status = healthz(bucket_lister, circuit)
        start_response(f"{status.value} {status.phrase}", [("Content-Length", "0")])
        return [b""]

    return app
"""
Brief: Global pytest configuration: src on sys.path, per-test timeout, shared fakes.

Inputs:
  - None

Outputs:
  - None
"""

import os
import signal
import sys
from typing import Dict, List, Tuple, Union

import pytest

# Ensure 'src' is on sys.path so 'whoiswalk' package is importable in tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC_DIR = os.path.join(ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)


def _alarm_handler(signum, frame):
    """
    Brief: Signal handler that raises TimeoutError when alarm triggers.

    Inputs:
      - signum: signal number (int)
      - frame: current frame (ignored)

    Outputs:
      - None: Raises TimeoutError to fail the test
    """
    raise TimeoutError("Test exceeded 10 seconds")


# Install handler if supported on this platform
if hasattr(signal, "SIGALRM"):
    signal.signal(signal.SIGALRM, _alarm_handler)


@pytest.fixture(autouse=True)
def enforce_test_timeout():
    """
    Brief: Enforce a hard 10-second timeout for each test.

    Inputs:
      - None

    Outputs:
      - None: Cancels alarm after test
    """
    if hasattr(signal, "SIGALRM"):
        signal.alarm(10)
        try:
            yield
        finally:
            signal.alarm(0)
    else:
        yield


class ScriptedLoader:
    """
    Brief: Loader test double answering per (host, strict) from a script.

    Inputs:
      - script: Mapping of host -> text/Exception, or (host, "strict"|"plain")
        -> text/Exception. Strict queries start with "=".

    Outputs:
      - Instances recording every (host, query) pair in `calls`.
    """

    def __init__(self, script: Dict[Union[str, Tuple[str, str]], object]):
        self.script = script
        self.calls: List[Tuple[str, str]] = []

    def load_text(self, host: str, query: str) -> str:
        from whoiswalk.exceptions import WhoisConnectionError

        self.calls.append((host, query))
        mode = "strict" if query.startswith("=") else "plain"
        value = self.script.get((host, mode), self.script.get(host))
        if value is None:
            raise WhoisConnectionError(f"unexpected host {host}")
        if isinstance(value, Exception):
            raise value
        return value

    def hosts(self) -> List[str]:
        return [h for h, _ in self.calls]


@pytest.fixture
def scripted_loader():
    """
    Brief: Factory fixture building ScriptedLoader instances.

    Inputs:
      - None

    Outputs:
      - Callable(script) -> ScriptedLoader
    """
    return ScriptedLoader


def registered(domain: str, referral: str = "", registrar: str = "Example Registrar") -> str:
    """
    Brief: Build a minimal "Key: value" WHOIS answer for a registered domain.

    Inputs:
      - domain: Domain name reported.
      - referral: Optional Registrar WHOIS Server value.
      - registrar: Registrar name.

    Outputs:
      - Response text.
    """
    lines = [f"Domain Name: {domain.upper()}", f"Registrar: {registrar}"]
    if referral:
        lines.append(f"Registrar WHOIS Server: {referral}")
    lines.append("Name Server: NS1.EXAMPLE.NET")
    lines.append(">>> Last update of whois database: 2026-01-01T00:00:00Z <<<")
    return "\n".join(lines) + "\n"


NO_MATCH = 'No match for "EXAMPLE.COM".\n>>> Last update of whois database <<<\n'

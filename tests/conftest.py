import os
import sys

import pytest

# Ensure project root is importable (so `import serfsd` and `main.py` work without installing)
_project_root = os.path.dirname(os.path.dirname(__file__))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from serfsd.membership import MembershipConnectionError, MembershipQueryError  # noqa: E402
from serfsd.runtime import Member  # noqa: E402


def m(addr: str, port: int = 9100, **kw) -> Member:
    return Member(addr=addr, port=port, **kw)


class ScriptedClient:
    def __init__(self, outcome):
        self.outcome = outcome
        self.closed = False

    def members(self):
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return list(self.outcome)

    def close(self):
        self.closed = True


class ScriptedConnector:
    """Connector returning one scripted outcome per call.

    Each step is a member list, a MembershipQueryError (raised by members())
    or a MembershipConnectionError (raised by connect itself). The last step
    repeats once the script is exhausted.
    """

    def __init__(self, *steps):
        self.steps = list(steps)
        self.calls = 0
        self.addresses = []
        self.clients = []

    def __call__(self, address):
        self.addresses.append(address)
        step = self.steps[min(self.calls, len(self.steps) - 1)]
        self.calls += 1
        if isinstance(step, MembershipConnectionError):
            raise step
        client = ScriptedClient(step)
        self.clients.append(client)
        return client


@pytest.fixture
def member():
    return m


@pytest.fixture
def scripted():
    return ScriptedConnector


@pytest.fixture
def query_error():
    return MembershipQueryError("rpc: members failed")


@pytest.fixture
def connection_error():
    return MembershipConnectionError("connection refused")

import os
import pytest

import nsminit
import unitbroker


@pytest.fixture
def clock():
    return nsminit.FakeClock()


@pytest.fixture
def broker_address(tmp_path):

    # ipc:// endpoints are limited to the length of a unix socket path;
    # the pytest temporary directory is usually short enough.

    path = os.path.join(str(tmp_path), 'nsm.sock')
    return 'ipc://' + path


@pytest.fixture
def run_broker(broker_address):
    """ Start a :class:`unitbroker.Broker` with the requested scripts; the
        broker is stopped when the test completes.
    """

    started = list()

    def start(**kwargs):
        broker = unitbroker.Broker(broker_address, **kwargs)
        started.append(broker)
        return broker

    yield start

    for broker in started:
        broker.stop()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

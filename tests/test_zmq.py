import nsminit
import pytest

from nsminit.errors import BrokerError
from nsminit.protocol import AdmissionRequest, Identity, Interface, ServiceDescriptor, StatusCode
from nsminit.transport import TransportConnectionError
from nsminit.transport.zmq import Client, endpoint


discovery = {
    'network_service': [
        {'metadata': {'name': 'gold', 'namespace': 'default'}, 'channel': []},
    ],
}


def make_request():
    requester = Identity('client-7f9c', 'default')
    interfaces = (Interface('KERNEL_INTERFACE', 'PREFERRED'),)
    return AdmissionRequest('4b1c5d2e', requester, 'gold', '4026531993', interfaces)


def test_endpoint():

    assert endpoint('/var/lib/nsm/nsm.sock') == 'ipc:///var/lib/nsm/nsm.sock'
    assert endpoint('tcp://127.0.0.1:5555') == 'tcp://127.0.0.1:5555'


def test_missing_socket(tmp_path):

    with pytest.raises(TransportConnectionError):
        Client(str(tmp_path / 'missing.sock'))


def test_discover(run_broker, broker_address):

    run_broker(discovery=[discovery])
    client = Client(broker_address, timeout=2)

    services = client.discover()

    assert services == [ServiceDescriptor('gold', 'default')]
    client.close()


def test_request_admission(run_broker, broker_address):

    admission = list()
    admission.append({'error': {'code': 'AlreadyExists', 'text': 'programming'}})
    admission.append({'accepted': True, 'connection_parameters': {'address': '10.0.0.2'}})

    broker = run_broker(admission=admission)
    client = Client(broker_address, timeout=2)
    request = make_request()

    with pytest.raises(BrokerError) as caught:
        client.request_admission(request)

    assert caught.value.code is StatusCode.ALREADY_EXISTS

    result = client.request_admission(request)

    assert result.accepted
    assert result.parameters == {'address': '10.0.0.2'}

    # Both attempts put the same admission request on the wire.

    payloads = [payload for op, payload in broker.received]
    assert len(payloads) == 2
    assert payloads[0] == payloads[1]

    client.close()


def test_no_response(run_broker, broker_address):

    run_broker(silent=True)
    client = Client(broker_address, timeout=0.1)

    with pytest.raises(BrokerError) as caught:
        client.discover()

    assert caught.value.code is StatusCode.OTHER
    assert 'no response' in str(caught.value)

    # A tighter per-call timeout wins over the client default.

    client.timeout = 10
    with pytest.raises(BrokerError):
        client.discover(timeout=0.1)

    client.close()


def test_closed(run_broker, broker_address):

    run_broker(discovery=[discovery])
    client = Client(broker_address, timeout=1)
    client.close()

    with pytest.raises(TransportConnectionError):
        client.discover()


def test_end_to_end(run_broker, broker_address):

    admission = list()
    admission.append({'error': {'code': 'AlreadyExists'}})
    admission.append({'accepted': True, 'connection_parameters': {'address': '10.0.0.2'}})

    run_broker(discovery=[discovery], admission=admission)
    client = Client(broker_address, timeout=1)

    configuration = nsminit.Configuration(
        socket=broker_address,
        services='unused',
        namespace='default',
        name='client-7f9c',
        request_id='4b1c5d2e',
        deadline=5,
        interval=0.05,
    )

    services = [nsminit.protocol.DesiredService('gold')]
    requester = Identity('client-7f9c', 'default')

    report = nsminit.run(configuration, client, services, requester, '4026531993')

    assert report.ok
    assert report.admitted == [('gold', {'address': '10.0.0.2'})]
    client.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

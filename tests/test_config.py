import argparse
import nsminit
import pytest

from nsminit import config
from nsminit.errors import ConfigurationError
from nsminit.protocol import DesiredService, Interface


def arguments(**kwargs):
    return argparse.Namespace(**kwargs)


def test_defaults():

    configuration = nsminit.Configuration.from_arguments(arguments(), environ={})

    assert configuration.socket == config.default_socket
    assert configuration.services is None
    assert configuration.deadline == 60
    assert configuration.interval == 2


def test_environment():

    environ = dict()
    environ['NSM_SOCKET'] = '/tmp/nsm.sock'
    environ['NSM_SERVICES'] = '/etc/nsm/networkService'
    environ['INIT_NAMESPACE'] = 'default'
    environ['HOSTNAME'] = 'client-7f9c'
    environ['NSM_REQUEST_ID'] = '4b1c5d2e'

    configuration = nsminit.Configuration.from_arguments(arguments(), environ)

    assert configuration.socket == '/tmp/nsm.sock'
    assert configuration.services == '/etc/nsm/networkService'
    assert configuration.namespace == 'default'
    assert configuration.name == 'client-7f9c'
    assert configuration.request_id == '4b1c5d2e'

    # Command line arguments take precedence.

    configuration = nsminit.Configuration.from_arguments(arguments(namespace='other', deadline=5), environ)
    assert configuration.namespace == 'other'
    assert configuration.deadline == 5


def test_immutable():

    configuration = nsminit.Configuration()

    with pytest.raises(AttributeError):
        configuration.deadline = 5


def test_validation():

    environ = {'NSM_SERVICES': '/etc/nsm/networkService', 'HOSTNAME': 'client', 'NSM_REQUEST_ID': 'x'}

    with pytest.raises(ConfigurationError):
        nsminit.Configuration.from_arguments(arguments(), environ)

    environ['INIT_NAMESPACE'] = 'default'
    nsminit.Configuration.from_arguments(arguments(), environ)

    del environ['NSM_REQUEST_ID']
    with pytest.raises(ConfigurationError):
        nsminit.Configuration.from_arguments(arguments(), environ)

    with pytest.raises(ConfigurationError):
        nsminit.Configuration(interval=-1).validate()


def test_zero_is_not_a_default():

    with pytest.raises(ConfigurationError):
        nsminit.Configuration.from_arguments(arguments(deadline=0.0), environ={})

    with pytest.raises(ConfigurationError):
        nsminit.Configuration.from_arguments(arguments(interval=0), environ={})

    with pytest.raises(ConfigurationError):
        nsminit.Configuration.from_arguments(arguments(call_timeout=0.0), environ={})

    configuration = nsminit.Configuration.from_arguments(arguments(deadline=None, interval=None), environ={})
    assert configuration.deadline == config.default_deadline
    assert configuration.interval == config.default_interval


def test_load_services(tmp_path):

    document = """
networkService:
  - name: gold
    serviceInterface:
      - type: KERNEL_INTERFACE
        preference: PREFERRED
  - name: silver
"""

    path = tmp_path / 'config.yaml'
    path.write_text(document)

    services = nsminit.load_services(str(path))

    assert services == [
        DesiredService('gold', (Interface('KERNEL_INTERFACE', 'PREFERRED'),)),
        DesiredService('silver'),
    ]


def test_mounted_value(tmp_path):
    """ A mounted configuration resource holds just the list, and JSON is
        accepted as well as YAML.
    """

    path = tmp_path / 'networkService'
    path.write_text('[{"name": "gold", "serviceInterface": [{"type": "KERNEL_INTERFACE"}]}]')

    services = nsminit.load_services(str(path))

    assert services == [DesiredService('gold', (Interface('KERNEL_INTERFACE', ''),))]


def test_string_value():

    document = {'networkService': '- name: gold\n- name: silver\n'}
    services = config.parse_services(document)

    assert [service.name for service in services] == ['gold', 'silver']


def test_empty():

    assert config.parse_services(None) == []
    assert config.parse_services({'networkService': None}) == []
    assert config.parse_services([]) == []


def test_invalid(tmp_path):

    with pytest.raises(ConfigurationError):
        config.parse_services({'services': []})

    with pytest.raises(ConfigurationError):
        config.parse_services({'networkService': {'name': 'gold'}})

    with pytest.raises(ConfigurationError):
        config.parse_services([{'serviceInterface': []}])

    with pytest.raises(ConfigurationError):
        config.parse_services([{'name': 'gold', 'serviceInterface': [{'preference': 'PREFERRED'}]}])

    with pytest.raises(ConfigurationError):
        nsminit.load_services(str(tmp_path / 'missing'))

    path = tmp_path / 'broken.yaml'
    path.write_text('networkService: [unterminated')

    with pytest.raises(ConfigurationError):
        nsminit.load_services(str(path))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:

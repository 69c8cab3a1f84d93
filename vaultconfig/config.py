'''
Configuration properties for the Vault client, read from YAML.
'''
import yaml
import logging

from enum import Enum, unique
from typing import Any, Dict, Optional

from vaultconfig.exceptions import ConfigException, UnsupportedAuthMethod


@unique
class AuthenticationMethod(Enum):
    TOKEN = 'TOKEN'
    APPID = 'APPID'

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise UnsupportedAuthMethod(
                'Authentication method {} not supported'.format(value)
            )


MAC_ADDRESS = 'MAC_ADDRESS'
IP_ADDRESS = 'IP_ADDRESS'


def _section(config, name):
    section = config.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigException(
            'Configuration section {} must be a mapping'.format(name)
        )
    return section


def _as_bool(value, name):
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ('true', 'yes', '1'):
        return True
    if isinstance(value, str) and value.lower() in ('false', 'no', '0'):
        return False
    raise ConfigException('{} must be a boolean, got {!r}'.format(name, value))


def _as_number(value, name):
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigException(
            '{} must be a number, got {!r}'.format(name, value)
        )
    if number <= 0:
        raise ConfigException('{} must be positive'.format(name))
    return number


class AppIdProperties(object):

    def __init__(self, app_id_path: str = 'app-id',
                 user_id: str = MAC_ADDRESS,
                 network_interface: Optional[str] = None) -> None:
        '''
        Args:
            app_id_path (str): Mount path of the AppId auth backend.
            user_id (str):
                UserId mechanism. MAC_ADDRESS, IP_ADDRESS, the name of a
                registered mechanism, or a literal user id.
            network_interface (str):
                Interface name or index hint for MAC_ADDRESS.
        '''
        self.app_id_path = app_id_path
        self.user_id = user_id
        self.network_interface = network_interface

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'AppIdProperties':
        interface = config.get('network_interface')
        return cls(
            app_id_path=config.get('app_id_path', 'app-id'),
            user_id=config.get('user_id', MAC_ADDRESS),
            network_interface=(
                str(interface) if interface is not None else None
            )
        )


class SslProperties(object):

    def __init__(self, verify=True, cert=None, key=None) -> None:
        '''
        Args:
            verify (bool|str): Verify the server, or path to a CA bundle.
            cert (str): Client certificate path.
            key (str): Client certificate key path.
        '''
        self.verify = verify
        self.cert = cert
        self.key = key

    @classmethod
    def from_dict(cls, config):
        verify = config.get('verify', True)
        if not isinstance(verify, str):
            verify = _as_bool(verify, 'ssl.verify')
        return cls(verify, config.get('cert'), config.get('key'))

    def client_cert(self):
        if self.cert and self.key:
            return (self.cert, self.key)
        return self.cert


class DatabaseSecretProperties(object):
    '''
    Credentials backend for one database kind (mysql, postgresql, ...).
    '''

    def __init__(self, kind: str, enabled: bool = False,
                 role: Optional[str] = None, backend: Optional[str] = None,
                 username_property: str = 'spring.datasource.username',
                 password_property: str = 'spring.datasource.password'
                 ) -> None:
        self.kind = kind
        self.enabled = enabled
        self.role = role
        self.backend = backend or kind
        self.username_property = username_property
        self.password_property = password_property

    @classmethod
    def from_dict(cls, kind, config, username_property, password_property):
        props = cls(
            kind=kind,
            enabled=_as_bool(
                config.get('enabled', False), '{}.enabled'.format(kind)
            ),
            role=config.get('role'),
            backend=config.get('backend', kind),
            username_property=config.get(
                'username_property', username_property
            ),
            password_property=config.get(
                'password_property', password_property
            )
        )
        if props.enabled:
            for attr in ('role', 'backend', 'username_property',
                         'password_property'):
                if not getattr(props, attr):
                    raise ConfigException(
                        '{}.{} must not be empty'.format(kind, attr)
                    )
        return props


class VaultProperties(object):

    def __init__(self, **kwargs):
        self.enabled = kwargs.get('enabled', True)
        self.host = kwargs.get('host', 'localhost')
        self.port = kwargs.get('port', 8200)
        self.scheme = kwargs.get('scheme', 'https')
        self.backend = kwargs.get('backend', 'secret')
        self.default_context = kwargs.get('default_context', 'application')
        self.application_name = kwargs.get('application_name', 'application')
        self.connection_timeout = kwargs.get('connection_timeout', 5)
        self.read_timeout = kwargs.get('read_timeout', 15)
        self.fail_fast = kwargs.get('fail_fast', False)
        self.token = kwargs.get('token')
        self.authentication = AuthenticationMethod.parse(
            kwargs.get('authentication', AuthenticationMethod.TOKEN)
        )
        self.app_id = kwargs.get('app_id') or AppIdProperties()
        self.ssl = kwargs.get('ssl') or SslProperties()
        self.mysql = kwargs.get('mysql') or DatabaseSecretProperties('mysql')
        self.postgresql = (
            kwargs.get('postgresql') or DatabaseSecretProperties('postgresql')
        )
        self.cassandra = kwargs.get('cassandra') or DatabaseSecretProperties(
            'cassandra',
            username_property='spring.data.cassandra.username',
            password_property='spring.data.cassandra.password'
        )

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'VaultProperties':
        '''
        Builds properties from the vault section of a configuration file.
        Missing keys take their defaults.
        '''
        if config is None:
            config = {}

        port = config.get('port', 8200)
        try:
            port = int(port)
        except (TypeError, ValueError):
            raise ConfigException('Invalid port {!r}'.format(port))
        if not 1 <= port <= 65535:
            raise ConfigException('Port {} out of range'.format(port))

        scheme = str(config.get('scheme', 'https')).lower()
        if scheme not in ('http', 'https'):
            raise ConfigException(
                'Scheme must be either http or https, got {}'.format(scheme)
            )

        return cls(
            enabled=_as_bool(config.get('enabled', True), 'enabled'),
            host=config.get('host', 'localhost'),
            port=port,
            scheme=scheme,
            backend=config.get('backend', 'secret'),
            default_context=config.get('default_context', 'application'),
            application_name=config.get('application_name', 'application'),
            connection_timeout=_as_number(
                config.get('connection_timeout', 5), 'connection_timeout'
            ),
            read_timeout=_as_number(
                config.get('read_timeout', 15), 'read_timeout'
            ),
            fail_fast=_as_bool(config.get('fail_fast', False), 'fail_fast'),
            token=config.get('token'),
            authentication=config.get('authentication', 'TOKEN'),
            app_id=AppIdProperties.from_dict(_section(config, 'app_id')),
            ssl=SslProperties.from_dict(_section(config, 'ssl')),
            mysql=DatabaseSecretProperties.from_dict(
                'mysql', _section(config, 'mysql'),
                'spring.datasource.username', 'spring.datasource.password'
            ),
            postgresql=DatabaseSecretProperties.from_dict(
                'postgresql', _section(config, 'postgresql'),
                'spring.datasource.username', 'spring.datasource.password'
            ),
            cassandra=DatabaseSecretProperties.from_dict(
                'cassandra', _section(config, 'cassandra'),
                'spring.data.cassandra.username',
                'spring.data.cassandra.password'
            )
        )

    @property
    def url(self) -> str:
        return '{}://{}:{}'.format(self.scheme, self.host, self.port)

    @property
    def timeout(self):
        return (self.connection_timeout, self.read_timeout)

    def database_backends(self):
        '''Database backends in the order they are queried.'''
        return [self.mysql, self.postgresql, self.cassandra]


def load_yaml(path):
    logging.info('Loading configuration from {}.'.format(path))
    with open(path, 'r') as f:
        return yaml.safe_load(f) or {}


def load_properties(path) -> VaultProperties:
    return VaultProperties.from_dict(load_yaml(path).get('vault'))

'''
Descriptors for secret locations in Vault and the transforms applied to
what is read from them.
'''
from typing import Any, Callable, Dict, Mapping

from vaultconfig.exceptions import ConfigException


PATH_TEMPLATE = '{backend}/{key}'


def _stringify(data: Mapping[str, Any]) -> Dict[str, str]:
    return {
        str(key): value if isinstance(value, str) else str(value)
        for key, value in data.items()
    }


class SecureBackendAccessor(object):
    '''
    One secret location: a path template, its variables and a transform
    from the raw Vault data to the properties it provides.
    '''

    def __init__(self, variables: Dict[str, str],
                 transform: Callable[[Mapping[str, Any]], Dict[str, str]],
                 template: str = PATH_TEMPLATE) -> None:
        self._variables = dict(variables)
        self._transform = transform
        self.template = template

    def variables(self) -> Dict[str, str]:
        return dict(self._variables)

    def path(self) -> str:
        '''The template expanded with this accessor's variables.'''
        return self.template.format(**self._variables)

    def transform_properties(self, data: Mapping[str, Any]) -> Dict[str, str]:
        return self._transform(data)

    def __repr__(self):
        return 'SecureBackendAccessor({})'.format(self._variables)


def generic(backend: str, key: str) -> SecureBackendAccessor:
    '''
    Accessor for a generic secret backend. Data is returned as is.
    '''
    if not backend:
        raise ConfigException('Backend must not be empty')
    if not key:
        raise ConfigException('Key must not be empty')

    return SecureBackendAccessor(
        variables={'backend': backend, 'key': key},
        transform=_stringify
    )


def database(properties) -> SecureBackendAccessor:
    '''
    Accessor for a database credentials backend. Maps the username and
    password Vault generates onto the configured property names.

    Args:
        properties (DatabaseSecretProperties): The database backend settings.
    '''
    if not properties.backend:
        raise ConfigException(
            '{} backend must not be empty'.format(properties.kind)
        )
    if not properties.role:
        raise ConfigException(
            '{} role must not be empty'.format(properties.kind)
        )

    username_property = properties.username_property
    password_property = properties.password_property

    def transform(data):
        result = {}
        if 'username' in data:
            result[username_property] = str(data['username'])
        if 'password' in data:
            result[password_property] = str(data['password'])
        return result

    return SecureBackendAccessor(
        variables={
            'backend': properties.backend,
            'key': 'creds/{}'.format(properties.role)
        },
        transform=transform
    )

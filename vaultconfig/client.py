'''
HTTP access to Vault.
'''
import logging

from typing import Any, Dict

from hvac import Client
from hvac.exceptions import VaultError

from requests.exceptions import RequestException

from vaultconfig import loader

from vaultconfig.accessor import SecureBackendAccessor

from vaultconfig.exceptions import SecretsException

from vaultconfig.token import VaultToken


API_VERSION = 'v1'


def _error_body(error):
    errors = getattr(error, 'errors', None)
    if errors:
        if isinstance(errors, (list, tuple)):
            return '; '.join(str(e) for e in errors)
        return str(errors)
    return None


class VaultClient(object):
    '''
    Reads secrets from Vault and logs in using the configured
    authentication strategy.
    '''

    def __init__(self, properties, authentication=None) -> None:
        '''
        Args:
            properties (VaultProperties): Connection and auth settings.
            authentication (BaseAuthentication):
                Strategy used by create_token. Built from properties when
                omitted, which also resolves the UserId mechanism.
        '''
        if properties is None:
            raise ValueError('VaultProperties must not be None')

        self.properties = properties
        self._authentication = (
            authentication or loader.build_authentication(properties)
        )
        self._client = Client(
            url=properties.url,
            token='',
            verify=properties.ssl.verify,
            cert=properties.ssl.client_cert(),
            timeout=properties.timeout
        )

    def url_for(self, path: str) -> str:
        return '{}/{}/{}'.format(self.properties.url, API_VERSION, path)

    def read(self, accessor: SecureBackendAccessor,
             token: VaultToken) -> Dict[str, str]:
        '''
        Reads the secret accessor points at, sending token as X-Vault-Token,
        and returns its transformed properties. A missing secret yields an
        empty dict.

        On failure an empty dict is returned as well, unless fail_fast is
        set, in which case SecretsException is raised.
        '''
        if accessor is None:
            raise ValueError('SecureBackendAccessor must not be None')
        if token is None:
            raise ValueError('VaultToken must not be None')

        path = accessor.path()
        logging.info(
            'Fetching config from server at: {}'.format(self.url_for(path))
        )

        error = None
        error_body = None
        try:
            self._client.token = token.token
            response = self._client.adapter.get(
                '/{}/{}'.format(API_VERSION, path)
            )
            data = response.get('data') if isinstance(response, dict) else None
            if data is not None:
                return accessor.transform_properties(data)

            logging.warning(
                'Could not locate PropertySource: key not found at {}'.format(
                    path
                )
            )
            return {}
        except VaultError as e:
            error = e
            error_body = _error_body(e)
        except RequestException as e:
            error = e

        if self.properties.fail_fast:
            raise SecretsException(
                'Could not locate PropertySource for {} and the fail fast '
                'property is set, failing'.format(accessor.variables())
            ) from error

        logging.warning(
            'Could not locate PropertySource: {}'.format(error_body or error)
        )
        return {}

    def post(self, path: str, data: Dict[str, Any]) -> Any:
        '''
        Unauthenticated POST of a JSON body, used for logins. Errors from
        Vault are raised as hvac exceptions.
        '''
        self._client.token = None
        return self._client.adapter.post(
            '/{}/{}'.format(API_VERSION, path), json=data
        )

    def create_token(self) -> VaultToken:
        '''
        Logs in with the configured authentication strategy.
        '''
        return self._authentication.login(self)

    def close(self) -> None:
        self._client.adapter.close()

'''
Collects properties from every configured Vault backend into one flat
mapping.
'''
import logging

from typing import Dict, List, Optional

from vaultconfig import accessor as accessors

from vaultconfig.accessor import SecureBackendAccessor

from vaultconfig.client import VaultClient

from vaultconfig.config import AuthenticationMethod

from vaultconfig.exceptions import (
    AuthException, ConfigException, SecretsException, UnsupportedAuthMethod
)

from vaultconfig.state import VaultState

from vaultconfig.token import VaultToken


class VaultPropertySource(object):
    '''
    Properties read from Vault for one context. Call init() once, then look
    properties up by name.
    '''

    def __init__(self, context: str, client: VaultClient, properties,
                 state: Optional[VaultState] = None) -> None:
        '''
        Args:
            context (str): Key read from the generic backend.
            client (VaultClient): Client used for all requests.
            properties (VaultProperties): Settings shared with the client.
            state (VaultState): Token store, shared between sources.
        '''
        self.name = context
        self.context = context
        self.client = client
        self.vault_properties = properties
        self.state = state if state is not None else VaultState()
        self._properties: Dict[str, str] = {}

    def init(self) -> None:
        if not self.vault_properties.backend:
            raise ConfigException(
                'No generic secret backend configured (vault.backend)'
            )

        if not self.vault_properties.enabled:
            logging.info('Vault is disabled, skipping.')
            return

        for accessor in self.secure_backend_accessors():
            # Login failures always propagate, only reads may degrade
            token = self.obtain_token()
            try:
                values = self.client.read(accessor, token)
            except (ConfigException, AuthException, SecretsException):
                raise
            except Exception as e:
                message = 'Unable to read properties from vault for {}'.format(
                    accessor.variables()
                )
                if self.vault_properties.fail_fast:
                    raise SecretsException(message) from e
                logging.error('{}: {}'.format(message, e))
                continue

            if values:
                self._properties.update(values)

        logging.info(
            'Loaded {} properties from vault for {}.'.format(
                len(self._properties), self.context
            )
        )

    def secure_backend_accessors(self) -> List[SecureBackendAccessor]:
        result = [
            accessors.generic(self.vault_properties.backend, self.context)
        ]
        for database in self.vault_properties.database_backends():
            if database.enabled:
                result.append(accessors.database(database))
        return result

    def obtain_token(self) -> VaultToken:
        return self.state.obtain(self._create_token)

    def _create_token(self) -> VaultToken:
        method = self.vault_properties.authentication

        if method == AuthenticationMethod.TOKEN:
            token = self.vault_properties.token
            if token is None or not str(token).strip():
                raise ConfigException('Token must not be empty')
            return VaultToken.of(token)

        if method == AuthenticationMethod.APPID:
            if not self.vault_properties.application_name:
                raise ConfigException('AppId must not be empty')
            if not self.vault_properties.app_id.app_id_path:
                raise ConfigException('AppIdPath must not be empty')
            return self.client.create_token()

        raise UnsupportedAuthMethod(
            'Authentication method {} not supported'.format(method)
        )

    def get_property(self, name: str) -> Optional[str]:
        return self._properties.get(name)

    def get_property_names(self) -> List[str]:
        return list(self._properties.keys())

    @property
    def properties(self) -> Dict[str, str]:
        return dict(self._properties)

    def __contains__(self, name):
        return name in self._properties

'''
Authentication using the AppId backend: a static AppId (the application
name) combined with a UserId computed on this machine.
'''
import logging

from hvac.exceptions import InvalidRequest

from vaultconfig.auth.auth import BaseAuthentication

from vaultconfig.exceptions import AuthException, ConfigException

from vaultconfig.token import VaultToken


class AppIdAuthentication(BaseAuthentication):

    def __init__(self, properties, user_id_mechanism) -> None:
        '''
        Args:
            properties (VaultProperties): The client configuration.
            user_id_mechanism (BaseUserIdMechanism): Source of the UserId.
        '''
        super().__init__(properties)
        self.user_id_mechanism = user_id_mechanism

    def validate(self) -> None:
        if not self.properties.application_name:
            raise ConfigException('AppId must not be empty')
        if not self.properties.app_id.app_id_path:
            raise ConfigException('AppIdPath must not be empty')

    def login_path(self) -> str:
        return 'auth/{}/login'.format(self.properties.app_id.app_id_path)

    def login(self, client) -> VaultToken:
        self.validate()
        login = {
            'app_id': self.properties.application_name,
            'user_id': self.user_id_mechanism.create_user_id()
        }
        logging.debug('Logging in using app-id {}'.format(login['app_id']))

        try:
            response = client.post(self.login_path(), login)
        except InvalidRequest as error:
            raise AuthException(
                'Cannot login using app-id: {}'.format(error)
            ) from error

        if not isinstance(response, dict):
            response = {}
        auth = response.get('auth') or {}
        if not auth.get('client_token'):
            raise AuthException('Cannot login using app-id')

        lease_duration = response.get('lease_duration')
        if lease_duration is None:
            lease_duration = auth.get('lease_duration', 0)

        return VaultToken.of(auth['client_token'], lease_duration)

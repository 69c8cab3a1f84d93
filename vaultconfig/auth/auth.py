'''
Authentication strategies used to obtain a Vault token.
'''
from abc import ABCMeta, abstractmethod

from vaultconfig.token import VaultToken


class BaseAuthentication(object, metaclass=ABCMeta):
    '''
    A way of logging into Vault. Strategies are looked up by the configured
    AuthenticationMethod, see vaultconfig.loader.
    '''

    def __init__(self, properties):
        '''
        Args:
            properties (VaultProperties): The client configuration.
        '''
        self.properties = properties

    @abstractmethod
    def validate(self) -> None:
        '''
        Checks the settings this strategy needs, raising ConfigException
        when they are missing.
        '''
        raise NotImplementedError()

    @abstractmethod
    def login(self, client) -> VaultToken:
        '''
        Obtains a new token.

        Args:
            client (VaultClient): Client used for any login request.
        '''
        raise NotImplementedError()

'''
Authentication using a static, preconfigured token.
'''
from vaultconfig.auth.auth import BaseAuthentication

from vaultconfig.exceptions import ConfigException

from vaultconfig.token import VaultToken


class TokenAuthentication(BaseAuthentication):

    def validate(self) -> None:
        token = self.properties.token
        if token is None or not str(token).strip():
            raise ConfigException('Token must not be empty')

    def login(self, client=None) -> VaultToken:
        self.validate()
        return VaultToken.of(self.properties.token)

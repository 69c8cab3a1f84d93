'''
A UserId configured as a literal value.
'''
from vaultconfig.userid.userid import BaseUserIdMechanism

from vaultconfig.exceptions import ConfigException


class StaticUserId(BaseUserIdMechanism):

    def __init__(self, user_id: str) -> None:
        if not user_id:
            raise ConfigException('UserId must not be empty')
        self._user_id = user_id

    def create_user_id(self) -> str:
        return self._user_id

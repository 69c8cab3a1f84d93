'''
Session scoped holder of the current Vault token.
'''
import threading

from typing import Callable, Optional

from vaultconfig.token import VaultToken


class VaultState(object):
    '''
    Holds at most one token, shared by every read in a session. Tokens are
    never evicted; expiry is not tracked.
    '''

    def __init__(self) -> None:
        self._token: Optional[VaultToken] = None
        self._lock = threading.Lock()

    @property
    def token(self) -> Optional[VaultToken]:
        return self._token

    @token.setter
    def token(self, token: VaultToken) -> None:
        with self._lock:
            self._token = token

    def obtain(self, factory: Callable[[], VaultToken]) -> VaultToken:
        '''
        Returns the held token, calling factory to create it on first use.
        Only one caller runs the factory even when several race for it.
        '''
        token = self._token
        if token is not None:
            return token

        with self._lock:
            if self._token is None:
                self._token = factory()
            return self._token

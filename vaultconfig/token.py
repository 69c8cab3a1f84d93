'''
Value object for a token issued by Vault.
'''
from collections import namedtuple

from vaultconfig.exceptions import ConfigException


class VaultToken(namedtuple('VaultToken', ['token', 'lease_duration'])):
    '''
    An immutable Vault token. Two tokens are equal when both the credential
    and the lease duration match.

    Use VaultToken.of() to build one, the factory refuses empty credentials.
    '''
    __slots__ = ()

    @classmethod
    def of(cls, token, lease_duration=0):
        '''
        Args:
            token (str): The opaque token credential, must not be blank.
            lease_duration (int): Lease in seconds, 0 if not tracked.
        Returns:
            VaultToken
        '''
        if token is None or not str(token).strip():
            raise ConfigException('Token must not be empty')
        if lease_duration is None:
            lease_duration = 0
        if int(lease_duration) < 0:
            raise ConfigException(
                'Lease duration must not be negative: {}'.format(
                    lease_duration
                )
            )
        return cls(str(token), int(lease_duration))

    def __repr__(self):
        # Never leak the credential into logs
        return 'VaultToken(token=***, lease_duration={})'.format(
            self.lease_duration
        )

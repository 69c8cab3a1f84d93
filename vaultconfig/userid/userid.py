'''
Mechanisms that produce the UserId half of an AppId login.
'''
import hashlib

from abc import ABCMeta, abstractmethod


def sha256_hex(text: str) -> str:
    '''
    Uppercase hex SHA-256 of the UTF-8 bytes of text. Matches
    `echo -n $text | sha256sum` up to case.
    '''
    return hashlib.sha256(text.encode('utf-8')).hexdigest().upper()


class BaseUserIdMechanism(object, metaclass=ABCMeta):
    '''
    Produces a stable identifier for this machine. Implementations must
    return the same value on every call within one environment.
    '''

    @abstractmethod
    def create_user_id(self) -> str:
        raise NotImplementedError()

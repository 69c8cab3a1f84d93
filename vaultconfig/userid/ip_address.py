'''
UserId derived from the IP address of the local host.
'''
import logging
import socket

from vaultconfig.userid.userid import BaseUserIdMechanism, sha256_hex

from vaultconfig.exceptions import ResolutionException


def local_host_address() -> str:
    '''
    Textual IP address the local host name resolves to.
    '''
    try:
        return socket.gethostbyname(socket.gethostname())
    except OSError as error:
        raise ResolutionException(
            'Cannot determine local host address: {}'.format(error)
        ) from error


class IpAddressUserId(BaseUserIdMechanism):
    '''
    SHA-256 of the local IP address, e.g. for 192.168.99.1 the result equals
    `echo -n 192.168.99.1 | sha256sum`.
    '''

    def create_user_id(self) -> str:
        address = local_host_address()
        logging.debug('Creating UserId from IP address {}'.format(address))
        return sha256_hex(address)

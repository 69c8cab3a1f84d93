'''
UserId derived from the hardware address of a network interface.
'''
import logging
import socket

import psutil

from typing import Optional

from vaultconfig.userid.userid import BaseUserIdMechanism, sha256_hex
from vaultconfig.userid.ip_address import local_host_address

from vaultconfig.exceptions import ResolutionException


def _hardware_address(addresses) -> Optional[str]:
    for address in addresses:
        if address.family == psutil.AF_LINK and address.address:
            mac = address.address.replace(':', '').replace('-', '').upper()
            if mac:
                return mac
    return None


class MacAddressUserId(BaseUserIdMechanism):
    '''
    SHA-256 of the MAC address of a network interface, formatted as
    uppercase hex without separators (AABBCCDDEEFF).

    The interface is picked by name or numeric index when network_interface
    is given, otherwise the first interface bound to the local host address.
    '''

    def __init__(self, network_interface: Optional[str] = None) -> None:
        self.network_interface = network_interface

    def _interface_name(self, interfaces) -> str:
        hint = self.network_interface
        if hint is not None and str(hint).strip():
            hint = str(hint).strip()
            if hint in interfaces:
                return hint
            if hint.isdigit():
                for index, name in socket.if_nameindex():
                    if index == int(hint) and name in interfaces:
                        return name
            raise ResolutionException(
                'Cannot determine NetworkInterface for {}'.format(hint)
            )

        address = local_host_address()
        for name, addresses in interfaces.items():
            for entry in addresses:
                if entry.family == socket.AF_INET and entry.address == address:
                    return name
        raise ResolutionException(
            'Cannot determine NetworkInterface for local address {}'.format(
                address
            )
        )

    def create_user_id(self) -> str:
        interfaces = psutil.net_if_addrs()
        name = self._interface_name(interfaces)

        mac = _hardware_address(interfaces[name])
        if mac is None:
            raise ResolutionException(
                'Network interface {} has no hardware address'.format(name)
            )

        logging.debug('Creating UserId from interface {}'.format(name))
        return sha256_hex(mac)

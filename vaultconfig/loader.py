'''
Registries and builders for the pluggable parts of the client.
'''
import logging

from vaultconfig.auth.auth import BaseAuthentication
from vaultconfig.auth.appid import AppIdAuthentication
from vaultconfig.auth.token import TokenAuthentication

from vaultconfig.config import AuthenticationMethod, IP_ADDRESS, MAC_ADDRESS

from vaultconfig.userid.userid import BaseUserIdMechanism
from vaultconfig.userid.ip_address import IpAddressUserId
from vaultconfig.userid.mac_address import MacAddressUserId
from vaultconfig.userid.static import StaticUserId

from vaultconfig.exceptions import (
    ConfigException, InvalidUserIdMechanism, UnsupportedAuthMethod
)


CUSTOM_PREFIX = 'custom:'

userid_mechanisms = {}


def register_userid_mechanism(name, factory=None):
    '''
    Registers a factory for a custom UserId mechanism, selected in the
    configuration with `user_id: custom:<name>`. Usable as a decorator.
    '''
    if not name:
        raise ConfigException('UserId mechanism name must not be empty')

    def register(factory):
        userid_mechanisms[name] = factory
        return factory

    if factory is None:
        return register
    return register(factory)


def unregister_userid_mechanism(name):
    userid_mechanisms.pop(name, None)


def load_userid_mechanism(name):
    try:
        factory = userid_mechanisms[name]
    except KeyError:
        raise InvalidUserIdMechanism(
            'UserId mechanism "{}" is not registered'.format(name)
        )

    mechanism = factory()
    if not (isinstance(mechanism, BaseUserIdMechanism) or
            callable(getattr(mechanism, 'create_user_id', None))):
        raise InvalidUserIdMechanism(
            'UserId mechanism "{}" does not provide create_user_id'.format(
                name
            )
        )
    return mechanism


def build_userid_mechanism(app_id_properties):
    '''
    Args:
        app_id_properties (AppIdProperties): AppId settings.
    Returns:
        The mechanism selected by app_id.user_id.
    '''
    user_id = app_id_properties.user_id
    if not user_id:
        raise ConfigException('UserId mechanism must not be empty')

    if user_id == MAC_ADDRESS:
        return MacAddressUserId(app_id_properties.network_interface)
    if user_id == IP_ADDRESS:
        return IpAddressUserId()
    if user_id.startswith(CUSTOM_PREFIX):
        return load_userid_mechanism(user_id[len(CUSTOM_PREFIX):])

    logging.debug('Using static UserId.')
    return StaticUserId(user_id)


def build_token_authentication(properties, user_id_mechanism=None):
    return TokenAuthentication(properties)


def build_appid_authentication(properties, user_id_mechanism=None):
    if user_id_mechanism is None:
        user_id_mechanism = build_userid_mechanism(properties.app_id)
    return AppIdAuthentication(properties, user_id_mechanism)


authentications = {
    AuthenticationMethod.TOKEN: build_token_authentication,
    AuthenticationMethod.APPID: build_appid_authentication,
}


def build_authentication(properties,
                         user_id_mechanism=None) -> BaseAuthentication:
    try:
        builder = authentications[properties.authentication]
    except KeyError:
        raise UnsupportedAuthMethod(
            'Cannot create a token for auth method {}'.format(
                properties.authentication
            )
        )
    return builder(properties, user_id_mechanism)

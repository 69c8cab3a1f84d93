import unittest

from unittest.mock import MagicMock
from unittest.mock import patch

from hvac.exceptions import InternalServerError

from vaultconfig.client import VaultClient
from vaultconfig.config import VaultProperties
from vaultconfig.exceptions import (
    AuthException, ConfigException, SecretsException, UnsupportedAuthMethod
)
from vaultconfig.propertysource import VaultPropertySource
from vaultconfig.state import VaultState
from vaultconfig.token import VaultToken


VAULT_CFG = {
    'scheme': 'http',
    'host': 'vault.local',
    'token': 'static-token',
    'mysql': {'enabled': True, 'role': 'readonly'},
}

APPID_CFG = dict(
    VAULT_CFG,
    authentication='APPID',
    application_name='my-app',
    app_id={'user_id': 'my-user'}
)


def build_source(config, client=None):
    props = VaultProperties.from_dict(config)
    if client is None:
        client = MagicMock()
        client.read.return_value = {}
    return VaultPropertySource('application', client, props, VaultState())


class TestVaultPropertySource(unittest.TestCase):
    def test__accessors(self):
        source = build_source({
            'backend': 'kv',
            'cassandra': {'enabled': True, 'role': 'c'},
            'mysql': {'enabled': True, 'role': 'm'},
            'postgresql': {'enabled': True, 'role': 'p'},
        })

        self.assertEqual(
            [a.path() for a in source.secure_backend_accessors()],
            [
                'kv/application',
                'mysql/creds/m',
                'postgresql/creds/p',
                'cassandra/creds/c',
            ]
        )

    def test__accessors_generic_only(self):
        source = build_source({'token': 'abc'})

        self.assertEqual(
            [a.path() for a in source.secure_backend_accessors()],
            ['secret/application']
        )

    def test__init_merges_last_write_wins(self):
        source = build_source(VAULT_CFG)
        source.client.read.side_effect = [
            {'k': 'generic', 'only.generic': 'g'},
            {'k': 'mysql', 'spring.datasource.username': 'u'},
        ]

        source.init()

        self.assertEqual(source.get_property('k'), 'mysql')
        self.assertEqual(source.get_property('only.generic'), 'g')
        self.assertEqual(source.get_property('spring.datasource.username'), 'u')
        self.assertIsNone(source.get_property('missing'))
        self.assertEqual(
            sorted(source.get_property_names()),
            ['k', 'only.generic', 'spring.datasource.username']
        )
        self.assertIn('k', source)

    def test__init_static_token(self):
        source = build_source(VAULT_CFG)

        source.init()

        for call in source.client.read.call_args_list:
            self.assertEqual(call[0][1], VaultToken('static-token', 0))
        self.assertEqual(source.client.read.call_count, 2)
        source.client.create_token.assert_not_called()
        self.assertEqual(source.state.token, VaultToken('static-token', 0))

    def test__init_empty_token(self):
        source = build_source(dict(VAULT_CFG, token=''))

        with self.assertRaises(ConfigException):
            source.init()
        source.client.read.assert_not_called()

    def test__init_appid_logs_in_once(self):
        source = build_source(APPID_CFG)
        source.client.create_token.return_value = VaultToken.of('tok-1', 300)

        source.init()

        source.client.create_token.assert_called_once_with()
        self.assertEqual(source.client.read.call_count, 2)
        for call in source.client.read.call_args_list:
            self.assertEqual(call[0][1], VaultToken('tok-1', 300))

    def test__init_appid_missing_path(self):
        source = build_source(
            dict(APPID_CFG, app_id={'user_id': 'u', 'app_id_path': ''})
        )

        with self.assertRaises(ConfigException):
            source.init()
        source.client.create_token.assert_not_called()

    def test__init_appid_missing_name(self):
        source = build_source(dict(APPID_CFG, application_name=''))

        with self.assertRaises(ConfigException):
            source.init()

    def test__init_reuses_held_token(self):
        source = build_source(APPID_CFG)
        source.state.token = VaultToken.of('held')

        source.init()

        source.client.create_token.assert_not_called()
        self.assertEqual(
            source.client.read.call_args[0][1], VaultToken.of('held')
        )

    def test__init_shared_state(self):
        state = VaultState()
        client = MagicMock()
        client.read.return_value = {}
        client.create_token.return_value = VaultToken.of('tok-1')
        props = VaultProperties.from_dict(APPID_CFG)

        VaultPropertySource('application', client, props, state).init()
        VaultPropertySource('other', client, props, state).init()

        client.create_token.assert_called_once_with()

    def test__init_unsupported_method(self):
        source = build_source(VAULT_CFG)
        source.vault_properties.authentication = 'KERBEROS'

        with self.assertRaises(UnsupportedAuthMethod):
            source.init()

    def test__init_no_backend(self):
        source = build_source(dict(VAULT_CFG, backend=''))

        with self.assertRaises(ConfigException):
            source.init()
        source.client.read.assert_not_called()

    def test__init_disabled(self):
        source = build_source(dict(VAULT_CFG, enabled=False))

        source.init()

        source.client.read.assert_not_called()
        self.assertEqual(source.get_property_names(), [])

    def test__init_login_rejected(self):
        source = build_source(APPID_CFG)
        source.client.create_token.side_effect = AuthException('rejected')

        with self.assertRaises(AuthException):
            source.init()

    def test__init_unexpected_error_logged(self):
        source = build_source(VAULT_CFG)
        source.client.read.side_effect = [
            RuntimeError('bad data'),
            {'spring.datasource.username': 'u'},
        ]

        with self.assertLogs(level='ERROR'):
            source.init()

        self.assertEqual(source.properties, {'spring.datasource.username': 'u'})

    def test__init_unexpected_error_fail_fast(self):
        source = build_source(dict(VAULT_CFG, fail_fast=True))
        source.client.read.side_effect = RuntimeError('bad data')

        with self.assertRaises(SecretsException):
            source.init()


class TestVaultPropertySourceHttp(unittest.TestCase):
    @patch('vaultconfig.client.Client')
    def test__server_error_degrades(self, mk_client):
        props = VaultProperties.from_dict(VAULT_CFG)
        source = VaultPropertySource(
            'application', VaultClient(props), props, VaultState()
        )
        mk_client.return_value.adapter.get.side_effect = [
            InternalServerError('boom'),
            {'data': {'username': 'u', 'password': 'p'}},
        ]

        source.init()

        self.assertEqual(source.properties, {
            'spring.datasource.username': 'u',
            'spring.datasource.password': 'p'
        })

    @patch('vaultconfig.client.Client')
    def test__server_error_fail_fast(self, mk_client):
        props = VaultProperties.from_dict(dict(VAULT_CFG, fail_fast=True))
        source = VaultPropertySource(
            'application', VaultClient(props), props, VaultState()
        )
        mk_client.return_value.adapter.get.side_effect = [
            InternalServerError('boom'),
            {'data': {'username': 'u', 'password': 'p'}},
        ]

        with self.assertRaises(SecretsException):
            source.init()
        self.assertEqual(mk_client.return_value.adapter.get.call_count, 1)

    @patch('vaultconfig.client.Client')
    def test__appid_single_login(self, mk_client):
        props = VaultProperties.from_dict(APPID_CFG)
        source = VaultPropertySource(
            'application', VaultClient(props), props, VaultState()
        )
        mk_client.return_value.adapter.post.return_value = {
            'auth': {'client_token': 'tok-1'}, 'lease_duration': 300
        }
        mk_client.return_value.adapter.get.return_value = {
            'data': {'key': 'value'}
        }

        source.init()

        mk_client.return_value.adapter.post.assert_called_once_with(
            '/v1/auth/app-id/login',
            json={'app_id': 'my-app', 'user_id': 'my-user'}
        )
        self.assertEqual(mk_client.return_value.adapter.get.call_count, 2)
        self.assertEqual(source.get_property('key'), 'value')
        self.assertEqual(mk_client.return_value.token, 'tok-1')

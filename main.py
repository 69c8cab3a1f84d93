import logging

from logging import basicConfig as logConfig, getLogger

from vaultconfig.client import VaultClient
from vaultconfig.config import VaultProperties, load_yaml
from vaultconfig.exceptions import ConfigException
from vaultconfig.propertysource import VaultPropertySource
from vaultconfig.state import VaultState


def main(config_path='config/vault.yaml'):
    # Load our config first
    config = load_yaml(config_path)

    # Setup logging
    level = config.get('logging', {}).get('level', 'INFO')
    if level not in ['CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG']:
        raise ConfigException('Invalid logging level - {}'.format(level))

    logConfig(level=level,
              format='[%(asctime)s %(levelname)s] %(message)s')
    getLogger('requests').setLevel(level)
    getLogger('urllib3').setLevel(level)

    properties = VaultProperties.from_dict(config.get('vault'))
    client = VaultClient(properties)
    try:
        source = VaultPropertySource(
            context=properties.default_context,
            client=client,
            properties=properties,
            state=VaultState()
        )
        source.init()
    finally:
        client.close()

    for name in sorted(source.get_property_names()):
        logging.info('Resolved property {}'.format(name))

    return source


if __name__ == '__main__':
    main()

class VaultException(Exception):
    pass


class ConfigException(VaultException, ValueError):
    pass


class InvalidUserIdMechanism(ConfigException):
    pass


class UnsupportedAuthMethod(ConfigException, NotImplementedError):
    pass


class AuthException(VaultException):
    pass


class SecretsException(VaultException):
    pass


class ResolutionException(VaultException):
    pass

class DOIProviderError(Exception):
    """Base class for exceptions raised by doiprovider"""
    pass


class IdentifierError(DOIProviderError):
    """Raised when an identifier operation cannot be completed"""
    pass


class ConfigurationError(IdentifierError):
    """Raised when a required configuration property is not defined"""

    def __init__(self, property_name):
        super().__init__('Unconfigured:  define {}'.format(property_name))
        self.property_name = property_name


class IdentifierNotFoundError(IdentifierError):
    """Raised when no object is bound to an identifier, or an object carries no identifier"""
    pass


class IdentifierNotResolvableError(IdentifierError):
    """Raised when the lookup machinery itself fails while resolving an identifier"""
    pass


class EzidRequestError(DOIProviderError):
    """Raised when a request to EZID could not be sent or completed"""

    def __init__(self, reason):
        super().__init__(reason)
        self.reason = reason


class PersistenceError(DOIProviderError):
    """Raised by metadata stores and contexts when an update, commit or query fails"""
    pass

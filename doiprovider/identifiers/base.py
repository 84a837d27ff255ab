import abc


class Identifier(object):
    """Marker type for persistent identifier kinds."""
    pass


class DOI(Identifier):
    SCHEME = 'doi:'


class IdentifierProvider(abc.ABC):
    """Service that assigns, resolves and retires one kind of identifier."""

    @abc.abstractmethod
    def supports(self, identifier):
        """True if this provider handles ``identifier``, which may be an
        Identifier subclass or an identifier string.
        """
        pass

    @abc.abstractmethod
    def register(self, context, item, identifier=None):
        pass

    @abc.abstractmethod
    def reserve(self, context, item, identifier):
        pass

    @abc.abstractmethod
    def mint(self, context, item):
        pass

    @abc.abstractmethod
    def resolve(self, context, identifier, *attributes):
        pass

    @abc.abstractmethod
    def lookup(self, context, item):
        pass

    @abc.abstractmethod
    def delete(self, context, item, identifier=None):
        pass

import abc
from collections import namedtuple

# Wildcard for qualifier and language lookups
ANY = '*'


class MetadataValue(namedtuple('MetadataValue', ['schema', 'element', 'qualifier', 'language', 'value'])):
    """One schema.element.qualifier value held by an item."""

    __slots__ = ()

    @property
    def field(self):
        return '.'.join(part for part in (self.schema, self.element, self.qualifier) if part)

    def __str__(self):
        return self.field


def parse_field(field):
    """Split ``schema.element[.qualifier]`` into its three parts; a missing
    qualifier is None.
    """
    parts = field.split('.', 2)
    if len(parts) < 2:
        raise ValueError('Not a schema.element[.qualifier] field name: {!r}'.format(field))
    schema, element = parts[0], parts[1]
    qualifier = parts[2] if len(parts) == 3 else None
    return schema, element, qualifier


class Item(abc.ABC):
    """An object in the content store that carries descriptive metadata."""

    type_text = 'ITEM'

    @property
    @abc.abstractmethod
    def id(self):
        pass

    @property
    @abc.abstractmethod
    def handle(self):
        """Persistent local handle, or None when the item has not been assigned one."""
        pass

    @abc.abstractmethod
    def get_metadata(self, schema, element, qualifier, language=ANY):
        """Return a list of MetadataValue in storage order.

        ``qualifier=None`` selects unqualified values only; ANY matches every
        qualifier (likewise for language).
        """
        pass

    @abc.abstractmethod
    def add_metadata(self, schema, element, qualifier, language, values):
        """Append one value (a string) or several (a list of strings)."""
        pass

    @abc.abstractmethod
    def clear_metadata(self, schema, element, qualifier, language=ANY):
        pass

    @abc.abstractmethod
    def update(self):
        """Stage metadata changes in the current transaction. Raises PersistenceError."""
        pass

    def get_metadata_by_metadata_string(self, field):
        schema, element, qualifier = parse_field(field)
        return self.get_metadata(schema, element, qualifier, ANY)


class ItemStore(abc.ABC):

    @abc.abstractmethod
    def find_by_metadata_field(self, context, schema, element, qualifier, value):
        """Iterate the items holding ``value`` under the given field.

        Raises PersistenceError when the query fails.
        """
        pass

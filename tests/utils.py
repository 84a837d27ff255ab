from doiprovider.content import ANY, Item, ItemStore, MetadataValue
from doiprovider.exceptions import PersistenceError
from doiprovider.transactions import Context


def _matches(value, schema, element, qualifier, language):
    return (
        value.schema == schema and
        value.element == element and
        (qualifier == ANY or value.qualifier == qualifier) and
        (language == ANY or value.language == language)
    )


class FakeItem(Item):
    """In-memory item; ``fail_update`` makes ``update`` raise."""

    def __init__(self, id, handle=None, metadata=None, fail_update=False):
        self._id = id
        self._handle = handle
        self.metadata = list(metadata or [])
        self.fail_update = fail_update
        self.updates = 0

    @property
    def id(self):
        return self._id

    @property
    def handle(self):
        return self._handle

    def get_metadata(self, schema, element, qualifier, language=ANY):
        return [
            value for value in self.metadata
            if _matches(value, schema, element, qualifier, language)
        ]

    def add_metadata(self, schema, element, qualifier, language, values):
        if isinstance(values, str):
            values = [values]
        self.metadata.extend(
            MetadataValue(schema, element, qualifier, language, value)
            for value in values
        )

    def clear_metadata(self, schema, element, qualifier, language=ANY):
        self.metadata = [
            value for value in self.metadata
            if not _matches(value, schema, element, qualifier, language)
        ]

    def update(self):
        if self.fail_update:
            raise PersistenceError('Item {} could not be updated'.format(self._id))
        self.updates += 1

    def values(self, field):
        return [each.value for each in self.get_metadata_by_metadata_string(field)]

    def __repr__(self):
        return '<FakeItem {}>'.format(self._id)


class FakeContext(Context):

    def __init__(self, fail_commit=False):
        self.fail_commit = fail_commit
        self.commits = 0
        self.aborts = 0

    def commit(self):
        if self.fail_commit:
            raise PersistenceError('commit refused')
        self.commits += 1

    def abort(self):
        self.aborts += 1


class FakeItemStore(ItemStore):

    def __init__(self, items=None, broken=False):
        self.items = list(items or [])
        self.broken = broken

    def find_by_metadata_field(self, context, schema, element, qualifier, value):
        if self.broken:
            raise PersistenceError('query failed')
        for item in self.items:
            if any(each.value == value for each in item.get_metadata(schema, element, qualifier)):
                yield item

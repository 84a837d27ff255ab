"""Value converters applied to single crosswalk fields.

A transform is any callable taking the local metadata value and returning the
value EZID should receive. It raises (typically ValueError) when the value
cannot be converted; the crosswalk then drops that value.
"""
import re
import types

from doiprovider.exceptions import ConfigurationError

transform_registry = {}

YEAR_RE = re.compile(r'^\s*(\d{4})(?:\D|$)')
WHITESPACE_RE = re.compile(r'\s+')

DATACITE_RESOURCE_TYPE_MAP = {
    'Animation': 'Audiovisual',
    'Article': 'Text',
    'Audio/Video': 'Audiovisual',
    'Book': 'Text',
    'Book chapter': 'Text',
    'Dataset': 'Dataset',
    'Image': 'Image',
    'Learning Object': 'InteractiveResource',
    'Model': 'Model',
    'Preprint': 'Text',
    'Presentation': 'Text',
    'Recording, acoustical': 'Sound',
    'Recording, musical': 'Sound',
    'Software': 'Software',
    'Technical Report': 'Text',
    'Thesis': 'Text',
    'Video': 'Audiovisual',
    'Working Paper': 'Text',
    'Other': 'Other',
}


def register(name):
    """Register transform functions into transform_registry"""
    def decorator(func):
        transform_registry[name] = func
        return func
    return decorator


@register('date_to_year')
def date_to_year(value):
    """'2014-05-01T10:00:00Z' -> '2014'"""
    match = YEAR_RE.match(value)
    if not match:
        raise ValueError('No year in date {!r}'.format(value))
    return match.group(1)


@register('resource_type_general')
def resource_type_general(value):
    try:
        return DATACITE_RESOURCE_TYPE_MAP[value.strip()]
    except KeyError:
        raise ValueError('No DataCite resourceTypeGeneral for {!r}'.format(value))


@register('strip')
def strip(value):
    return WHITESPACE_RE.sub(' ', value).strip()


def get_transform(transform):
    if callable(transform):
        return transform
    try:
        return transform_registry[transform]
    except KeyError:
        raise ConfigurationError('a registered transform named {!r}'.format(transform))


def build_transform_table(transforms):
    """Freeze a target field -> transform (callable or registered name) table."""
    return types.MappingProxyType({
        field: get_transform(transform)
        for field, transform in (transforms or {}).items()
    })

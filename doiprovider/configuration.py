import logging
import os

logger = logging.getLogger(__name__)

TRUE_VALUES = ('true', 'yes', 'on', '1')


def environ_name(property_name):
    """Environment variable consulted for a dotted property name,
    e.g. ``identifier.doi.ezid.user`` -> ``IDENTIFIER_DOI_EZID_USER``.
    """
    return property_name.replace('.', '_').replace('-', '_').upper()


class ConfigurationService(object):
    """Read-only, flat key -> string lookup of installation properties.

    Explicitly supplied properties win over the process environment.
    Blank values are treated as undefined.
    """

    def __init__(self, properties=None, environ=None):
        self._properties = dict(properties or {})
        self._environ = os.environ if environ is None else environ

    def get_property(self, name):
        value = self._properties.get(name)
        if value is None:
            value = self._environ.get(environ_name(name))
        if value is None:
            return None
        value = str(value)
        return value if value.strip() else None

    def get_property_as_type(self, name, default):
        value = self.get_property(name)
        if value is None:
            return default
        if isinstance(default, bool):
            return value.strip().lower() in TRUE_VALUES
        if isinstance(default, (int, float)):
            try:
                return type(default)(value.strip())
            except ValueError:
                logger.warning('Property %s has unparsable value %r; using %r', name, value, default)
                return default
        return value

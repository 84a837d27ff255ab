import logging

from datacite import schema40

from doiprovider import settings
from doiprovider.exceptions import ConfigurationError
from doiprovider.identifiers.base import DOI
from doiprovider.identifiers.transforms import DATACITE_RESOURCE_TYPE_MAP, date_to_year
from doiprovider.identifiers.utils import item_url

logger = logging.getLogger(__name__)

crosswalk_registry = {}

# DataCite's code for a mandatory value that is not available
UNAVAILABLE = '(:unav)'


def register(name):
    """Register classes into crosswalk_registry"""
    def decorator(cls):
        crosswalk_registry[name] = cls
        return cls
    return decorator


def get_dissemination_crosswalk(name, configuration, clock):
    try:
        cls = crosswalk_registry[name]
    except KeyError:
        raise ConfigurationError('a dissemination crosswalk named {!r}'.format(name))
    return cls(configuration, clock)


class DisseminationCrosswalk(object):
    """Render a complete metadata document for an item."""

    def __init__(self, configuration, clock):
        self.configuration = configuration
        self.clock = clock

    def disseminate(self, item):
        raise NotImplementedError


@register('DataCite')
class DataCiteCrosswalk(DisseminationCrosswalk):
    """DataCite kernel-4 XML built from an item's Dublin Core metadata."""

    def _values(self, item, field):
        return [each.value for each in item.get_metadata_by_metadata_string(field) if each.value]

    def serialize_json(self, item):
        doc = {
            'creators': [
                {'creatorName': name}
                for name in (self._values(item, 'dc.contributor.author') or self._values(item, 'dc.creator'))
            ] or [{'creatorName': UNAVAILABLE}],
            'titles': [{'title': title} for title in self._values(item, 'dc.title')] or [{'title': UNAVAILABLE}],
        }

        for title in self._values(item, 'dc.title.alternative'):
            doc['titles'].append({'title': title, 'titleType': 'AlternativeTitle'})

        dois = [value for value in self._values(item, 'dc.identifier') if value.startswith(DOI.SCHEME)]
        if dois:
            doc['identifier'] = {
                'identifier': dois[0][len(DOI.SCHEME):],
                'identifierType': 'DOI',
            }

        publishers = self._values(item, 'dc.publisher')
        if publishers:
            doc['publisher'] = publishers[0]
        else:
            doc['publisher'] = self.configuration.get_property_as_type(
                settings.CFG_PUBLISHER, settings.DEFAULT_PUBLISHER
            )

        issued = self._values(item, 'dc.date.issued')
        year = None
        if issued:
            doc['dates'] = [{'date': issued[0], 'dateType': 'Issued'}]
            try:
                year = date_to_year(issued[0])
            except ValueError:
                logger.warning('Unparsable issue date %r on %s #%s', issued[0], item.type_text, item.id)
        doc['publicationYear'] = year or str(self.clock().year)

        types = self._values(item, 'dc.type')
        if types:
            doc['resourceType'] = {
                'resourceType': types[0],
                'resourceTypeGeneral': DATACITE_RESOURCE_TYPE_MAP.get(types[0], 'Other'),
            }

        subjects = self._values(item, 'dc.subject')
        if subjects:
            doc['subjects'] = [{'subject': subject} for subject in subjects]

        abstracts = self._values(item, 'dc.description.abstract')
        if abstracts:
            doc['descriptions'] = [
                {'description': abstract, 'descriptionType': 'Abstract'}
                for abstract in abstracts
            ]

        rights = self._values(item, 'dc.rights')
        if rights:
            doc['rightsList'] = [{'rights': statement} for statement in rights]

        site_url = self.configuration.get_property(settings.CFG_SITE_URL)
        if item.handle and site_url:
            doc['alternateIdentifiers'] = [{
                'alternateIdentifier': item_url(site_url, item.handle),
                'alternateIdentifierType': 'URL',
            }]

        return doc

    def disseminate(self, item):
        xml = schema40.tostring(self.serialize_json(item))
        if isinstance(xml, bytes):
            xml = xml.decode('utf-8')
        return xml

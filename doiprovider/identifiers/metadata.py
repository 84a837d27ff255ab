import datetime
import logging
import types

import pytz

from doiprovider import settings
from doiprovider.identifiers.datacite import get_dissemination_crosswalk
from doiprovider.identifiers.transforms import build_transform_table
from doiprovider.identifiers.utils import item_url

logger = logging.getLogger(__name__)

# DataCite metadata field names
DATACITE_PUBLISHER = 'datacite.publisher'
DATACITE_PUBLICATION_YEAR = 'datacite.publicationyear'

# Reserved EZID keys
DATACITE_DOCUMENT = 'datacite'
TARGET = '_target'
STATUS = '_status'


def utcnow():
    return datetime.datetime.now(tz=pytz.utc)


class MetadataCrosswalk(object):
    """Map an item's local metadata onto the field set EZID requires.

    :param configuration: ConfigurationService
    :param crosswalk: target field (e.g. ``datacite.title``) -> source field
        (e.g. ``dc.title``)
    :param transforms: target field -> callable or registered transform name
    :param bool generate_datacite_xml: also render a full DataCite document
        under the ``datacite`` key
    :param str dissemination_crosswalk_name: registered renderer for that document
    :param clock: callable returning the current aware datetime
    """

    def __init__(self, configuration, crosswalk, transforms=None, generate_datacite_xml=False,
                 dissemination_crosswalk_name=settings.DEFAULT_DISSEMINATION_CROSSWALK, clock=None):
        self.configuration = configuration
        self.crosswalk = types.MappingProxyType(dict(crosswalk))
        self.transforms = build_transform_table(transforms)
        self.clock = clock or utcnow
        self.generate_datacite_xml = generate_datacite_xml
        self.dissemination_crosswalk = None
        if generate_datacite_xml:
            self.dissemination_crosswalk = get_dissemination_crosswalk(
                dissemination_crosswalk_name, configuration, self.clock
            )

    def crosswalk_metadata(self, item):
        if item is None:
            raise ValueError('Must be an Item')

        mapped = {}

        for key, source in self.crosswalk.items():
            transform = self.transforms.get(key)
            for value in item.get_metadata_by_metadata_string(source):
                if transform is None:
                    mapped[key] = value.value
                    continue
                try:
                    mapped[key] = transform(value.value)
                except Exception as e:
                    logger.error(
                        "Unable to transform '%s' from %s to %s:  %s",
                        value.value, value, key, e
                    )

        if self.dissemination_crosswalk is not None:
            document = self.dissemination_crosswalk.disseminate(item)
            logger.debug('Generated DataCite XML:  %s', document)
            mapped[DATACITE_DOCUMENT] = document

        # Supply a default publisher, if the item has none.
        if DATACITE_PUBLISHER not in mapped and DATACITE_DOCUMENT not in mapped:
            publisher = self.configuration.get_property_as_type(
                settings.CFG_PUBLISHER, settings.DEFAULT_PUBLISHER
            )
            logger.info('Supplying default publisher:  %s', publisher)
            mapped[DATACITE_PUBLISHER] = publisher

        # Supply current year as year of publication, if the item has none.
        if DATACITE_PUBLICATION_YEAR not in mapped and DATACITE_DOCUMENT not in mapped:
            year = '{:04d}'.format(self.clock().year)
            logger.info('Supplying default publication year:  %s', year)
            mapped[DATACITE_PUBLICATION_YEAR] = year

        # Supply _target link back to this item
        handle = item.handle
        if handle is None:
            logger.warning('%s #%s has no handle -- location not set.', item.type_text, item.id)
        else:
            site_url = self.configuration.get_property(settings.CFG_SITE_URL)
            if site_url is None:
                logger.warning('%s is not defined -- location of %s #%s not set.',
                               settings.CFG_SITE_URL, item.type_text, item.id)
            else:
                url = item_url(site_url, handle)
                logger.info('Supplying location:  %s', url)
                mapped[TARGET] = url

        return mapped

"""Provide DOIs through DataCite using the EZID service.

Installation-specific values (credentials and the "shoulder" that prefixes
every DOI minted here) come from the ConfigurationService:

``identifier.doi.ezid.shoulder``
    base of the site's DOIs, e.g. ``10.5072/FK2``
``identifier.doi.ezid.user``, ``identifier.doi.ezid.password``
    EZID credentials
``identifier.doi.ezid.publisher``
    default publisher for items not previously published; EZID requires one
``site.url``
    base URL used to build each item's ``_target`` link

The crosswalk (EZID field -> local field), its transforms and the optional
DataCite XML rendering are fixed when the provider is constructed.

An item's DOI lives only in its own ``dc.identifier`` metadata. Remote calls
and the local commit are not atomic: a remote side effect is never rolled back
when the commit that should record it fails.
"""
import logging

from requests import codes

from doiprovider import sentry, settings
from doiprovider.content import ANY
from doiprovider.exceptions import (
    ConfigurationError,
    EzidRequestError,
    IdentifierError,
    IdentifierNotFoundError,
    IdentifierNotResolvableError,
    PersistenceError,
)
from doiprovider.identifiers.base import DOI, IdentifierProvider
from doiprovider.identifiers.client import EzidRequestFactory
from doiprovider.identifiers.metadata import STATUS, MetadataCrosswalk

logger = logging.getLogger(__name__)

MD_SCHEMA = 'dc'
DOI_ELEMENT = 'identifier'
DOI_QUALIFIER = None

DOI_SCHEME = DOI.SCHEME


class EZIDIdentifierProvider(IdentifierProvider):

    def __init__(self, configuration, item_store, crosswalk, transforms=None, request_factory=None,
                 generate_datacite_xml=False,
                 dissemination_crosswalk_name=settings.DEFAULT_DISSEMINATION_CROSSWALK,
                 clock=None):
        self.configuration = configuration
        self.item_store = item_store
        self.request_factory = request_factory or EzidRequestFactory()
        self.metadata_crosswalk = MetadataCrosswalk(
            configuration,
            crosswalk,
            transforms=transforms,
            generate_datacite_xml=generate_datacite_xml,
            dissemination_crosswalk_name=dissemination_crosswalk_name,
            clock=clock,
        )

    # Configuration

    def _load(self, property_name):
        value = self.configuration.get_property(property_name)
        if value is None:
            raise ConfigurationError(property_name)
        return value

    def load_authority(self):
        return self._load(settings.CFG_SHOULDER)

    def load_user(self):
        return self._load(settings.CFG_USER)

    def load_password(self):
        return self._load(settings.CFG_PASSWORD)

    def _new_request(self):
        return self.request_factory.get_instance(
            self.load_authority(), self.load_user(), self.load_password()
        )

    # Identifier forms

    def id_to_doi(self, identifier):
        """Format a naked identifier as a DOI with our configured authority prefix.

        A value already carrying the ``doi:`` scheme is returned unchanged.
        """
        if identifier.startswith(DOI_SCHEME):
            return identifier
        return '{}{}{}'.format(DOI_SCHEME, self.load_authority(), identifier)

    def doi_to_id(self, doi):
        """Remove scheme and our configured authority prefix from a ``doi:`` string."""
        prefix = '{}{}'.format(DOI_SCHEME, self.load_authority())
        if doi.startswith(prefix):
            return doi[len(prefix):]
        return doi

    def crosswalk_metadata(self, item):
        return self.metadata_crosswalk.crosswalk_metadata(item)

    # Local bookkeeping

    def _doi_values(self, item):
        return [
            each.value
            for each in item.get_metadata(MD_SCHEMA, DOI_ELEMENT, DOI_QUALIFIER, ANY)
            if each.value is not None
        ]

    def _store(self, context, item, message):
        try:
            item.update()
            context.commit()
        except PersistenceError as e:
            logger.error('%s:  %s', message, e)
            sentry.log_exception(e, extra_data={'item': str(item.id)})
            raise IdentifierError(message) from e

    def _record(self, context, item, doi):
        item.add_metadata(MD_SCHEMA, DOI_ELEMENT, DOI_QUALIFIER, None, doi)
        self._store(context, item, 'New identifier not stored')

    # IdentifierProvider

    def supports(self, identifier):
        if isinstance(identifier, type):
            return issubclass(identifier, DOI)
        if identifier is None:
            return False
        return identifier.startswith(DOI_SCHEME)

    def register(self, context, item, identifier=None):
        """Without ``identifier``, return the item's DOI, minting and recording
        one if it has none. With ``identifier``, register that exact local
        identifier at EZID and record it; remote failures are logged only.
        """
        if identifier is not None:
            self._create(context, item, identifier, reserve=False)
            return None

        logger.debug('register %s', item)

        for value in self._doi_values(item):
            if value.startswith(DOI_SCHEME):
                return value

        doi = self.mint(context, item)
        self._record(context, item, doi)
        logger.info('Registered %s', doi)
        return doi

    def reserve(self, context, item, identifier):
        self._create(context, item, identifier, reserve=True)

    def _create(self, context, item, identifier, reserve):
        action, done = ('reserve', 'reserved') if reserve else ('register', 'registered')
        logger.debug('%s %s as %s', action, item, identifier)

        request = self._new_request()
        metadata = self.crosswalk_metadata(item)
        if reserve:
            metadata[STATUS] = 'reserved'

        try:
            response = request.create(identifier, metadata)
        except EzidRequestError as e:
            logger.error("Identifier '%s' not %s:  %s", identifier, done, e.reason)
            return

        if not response.success:
            logger.error("Identifier '%s' not %s -- EZID returned: %s",
                         identifier, done, response.ezid_status_value)
            return

        self._record(context, item, self.id_to_doi(identifier))
        logger.info('%s %s', done.capitalize(), identifier)

    def mint(self, context, item):
        logger.debug('mint for %s', item)

        request = self._new_request()

        try:
            response = request.mint(self.crosswalk_metadata(item))
        except EzidRequestError as e:
            logger.error('Failed to send EZID request:  %s', e.reason)
            raise IdentifierError('DOI request not sent:  {}'.format(e.reason)) from e

        if response.http_status_code != codes.created:
            logger.error('EZID server responded:  %s %s: %s',
                         response.http_status_code,
                         response.http_reason_phrase,
                         response.ezid_status_value)
            sentry.log_message(
                'Unexpected EZID response while minting a DOI',
                extra_data={
                    'status_code': response.http_status_code,
                    'ezid_status': response.ezid_status_value,
                },
            )
            raise IdentifierError('DOI not created:  {}:  {}'.format(
                response.http_reason_phrase, response.ezid_status_value
            ))

        if not response.success or not response.ezid_status_value:
            logger.error('EZID responded:  %s', response.ezid_status_value)
            raise IdentifierError('No DOI returned')

        # Whatever follows the pipe is the "shadow ARK"
        doi = response.ezid_status_value.split('|', 1)[0].strip()
        logger.info('Created %s', doi)
        return doi

    def resolve(self, context, identifier, *attributes):
        logger.debug('resolve %s', identifier)

        try:
            doi = self.id_to_doi(identifier)
            found = iter(self.item_store.find_by_metadata_field(
                context, MD_SCHEMA, DOI_ELEMENT, DOI_QUALIFIER, doi
            ))
            first = next(found, None)
            another = next(found, None) if first is not None else None
        except (ConfigurationError, PersistenceError) as e:
            logger.error(str(e))
            raise IdentifierNotResolvableError(str(e)) from e

        if first is None:
            raise IdentifierNotFoundError('No object bound to {}'.format(identifier))
        if another is not None:
            logger.error('More than one object bound to %s!', identifier)
            sentry.log_message('More than one object bound to {}'.format(identifier))
        logger.debug('Resolved to %s', first)
        return first

    def lookup(self, context, item):
        logger.debug('lookup %s', item)

        for value in self._doi_values(item):
            if value.startswith(DOI_SCHEME):
                logger.debug('Found %s', value)
                return value

        raise IdentifierNotFoundError('{} {} has no DOI'.format(item.type_text, item.id))

    def delete(self, context, item, identifier=None):
        """Delete the item's DOIs at EZID (all of them, or only ``identifier``).

        DOIs EZID did not delete stay on the item. The remaining values are
        committed before any failure is raised.
        """
        if identifier is None:
            logger.debug('delete %s', item)
            wanted = None
        else:
            logger.debug('delete %s from %s', identifier, item)
            wanted = self.id_to_doi(identifier)

        request = self._new_request()

        remainder = []
        skipped = 0
        for value in self._doi_values(item):
            if wanted is None:
                selected = value.startswith(DOI_SCHEME)
            else:
                selected = value == wanted
            if not selected:
                remainder.append(value)
                continue

            try:
                response = request.delete(self.doi_to_id(value))
            except EzidRequestError as e:
                logger.error('Failed request to EZID for %s:  %s', value, e.reason)
                remainder.append(value)
                skipped += 1
                continue

            if not response.success:
                logger.error('Unable to delete %s from DataCite:  %s',
                             value, response.ezid_status_value)
                sentry.log_message(
                    'Unable to delete {} from DataCite'.format(value),
                    extra_data={'ezid_status': response.ezid_status_value},
                )
                remainder.append(value)
                skipped += 1
                continue

            logger.info('Deleted %s', value)

        item.clear_metadata(MD_SCHEMA, DOI_ELEMENT, DOI_QUALIFIER, ANY)
        item.add_metadata(MD_SCHEMA, DOI_ELEMENT, DOI_QUALIFIER, None, remainder)
        self._store(context, item, 'Failed to re-add identifiers')

        if skipped > 0:
            if identifier is None:
                raise IdentifierError('{} identifiers could not be deleted.'.format(skipped))
            raise IdentifierError('{} could not be deleted.'.format(identifier))

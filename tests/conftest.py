import datetime
import logging

import pytest
import pytz
import responses

from doiprovider import settings
from doiprovider.configuration import ConfigurationService
from doiprovider.identifiers.provider import EZIDIdentifierProvider
from tests.utils import FakeContext, FakeItemStore

# Silence some 3rd-party logging
SILENT_LOGGERS = [
    'factory.generate',
    'factory.containers',
    'faker.factory',
]
for logger_name in SILENT_LOGGERS:
    logging.getLogger(logger_name).setLevel(logging.CRITICAL)

EZID_URL = 'https://ezid.cdlib.org'
SHOULDER = '10.5072/FK2'
SITE_URL = 'https://repository.example.edu'

CROSSWALK = {
    'datacite.creator': 'dc.contributor.author',
    'datacite.title': 'dc.title',
    'datacite.publisher': 'dc.publisher',
    'datacite.publicationyear': 'dc.date.issued',
    'datacite.resourcetype': 'dc.type',
}

TRANSFORMS = {
    'datacite.publicationyear': 'date_to_year',
}


@pytest.fixture()
def properties():
    return {
        settings.CFG_SHOULDER: SHOULDER,
        settings.CFG_USER: 'apitest',
        settings.CFG_PASSWORD: 'apitest',
        settings.CFG_SITE_URL: SITE_URL,
    }


@pytest.fixture()
def configuration(properties):
    return ConfigurationService(properties=properties, environ={})


@pytest.fixture()
def now():
    return datetime.datetime(2016, 3, 1, 12, 0, tzinfo=pytz.utc)


@pytest.fixture()
def clock(now):
    return lambda: now


@pytest.fixture()
def context():
    return FakeContext()


@pytest.fixture()
def item_store():
    return FakeItemStore()


@pytest.fixture()
def provider(configuration, item_store, clock):
    return EZIDIdentifierProvider(
        configuration,
        item_store,
        CROSSWALK,
        transforms=TRANSFORMS,
        clock=clock,
    )


@pytest.fixture()
def mock_ezid():
    """
    Intercept requests to EZID. Relevant endpoints:
    f'{EZID_URL}/shoulder/doi:{SHOULDER}'
    f'{EZID_URL}/id/doi:{SHOULDER}{name}'
    """
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps

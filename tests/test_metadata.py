import logging

import pytest

from doiprovider import settings
from doiprovider.configuration import ConfigurationService
from doiprovider.identifiers import datacite
from doiprovider.identifiers.metadata import (
    DATACITE_DOCUMENT,
    DATACITE_PUBLICATION_YEAR,
    DATACITE_PUBLISHER,
    TARGET,
    MetadataCrosswalk,
)
from tests.conftest import CROSSWALK, SITE_URL, TRANSFORMS
from tests.factories import ItemFactory, dc


def broken(value):
    raise ValueError('cannot convert {}'.format(value))


class TestMetadataCrosswalk:

    @pytest.fixture()
    def crosswalk(self, configuration, clock):
        return MetadataCrosswalk(configuration, CROSSWALK, transforms=TRANSFORMS, clock=clock)

    def test_maps_source_fields(self, crosswalk):
        item = ItemFactory(metadata=[
            dc('dc.title', 'On Whales'),
            dc('dc.publisher', 'Acme'),
            dc('dc.date.issued', '2011-07-04'),
        ])
        mapped = crosswalk.crosswalk_metadata(item)
        assert mapped['datacite.title'] == 'On Whales'
        assert mapped[DATACITE_PUBLISHER] == 'Acme'
        assert mapped[DATACITE_PUBLICATION_YEAR] == '2011'
        assert 'datacite.resourcetype' not in mapped

    def test_last_value_wins(self, crosswalk):
        item = ItemFactory(metadata=[
            dc('dc.contributor.author', 'Smith, J'),
            dc('dc.contributor.author', 'Jones, K'),
        ])
        assert crosswalk.crosswalk_metadata(item)['datacite.creator'] == 'Jones, K'

    def test_default_publisher(self, crosswalk):
        item = ItemFactory(metadata=[dc('dc.title', 'On Whales')])
        assert crosswalk.crosswalk_metadata(item)[DATACITE_PUBLISHER] == 'unknown'

    def test_configured_default_publisher(self, properties, clock):
        properties[settings.CFG_PUBLISHER] = 'Example University'
        configuration = ConfigurationService(properties, environ={})
        crosswalk = MetadataCrosswalk(configuration, CROSSWALK, clock=clock)
        item = ItemFactory(metadata=[])
        assert crosswalk.crosswalk_metadata(item)[DATACITE_PUBLISHER] == 'Example University'

    def test_default_publication_year_comes_from_clock(self, crosswalk):
        item = ItemFactory(metadata=[])
        assert crosswalk.crosswalk_metadata(item)[DATACITE_PUBLICATION_YEAR] == '2016'

    def test_failed_transform_drops_only_that_field(self, configuration, clock, caplog):
        crosswalk = MetadataCrosswalk(
            configuration, CROSSWALK, transforms={'datacite.title': broken}, clock=clock
        )
        item = ItemFactory(metadata=[
            dc('dc.title', 'On Whales'),
            dc('dc.contributor.author', 'Smith, J'),
        ])
        with caplog.at_level(logging.ERROR):
            mapped = crosswalk.crosswalk_metadata(item)
        assert 'datacite.title' not in mapped
        assert mapped['datacite.creator'] == 'Smith, J'
        assert "Unable to transform 'On Whales'" in caplog.text

    def test_unparsable_year_falls_back_to_clock(self, crosswalk):
        item = ItemFactory(metadata=[dc('dc.date.issued', 'sometime')])
        assert crosswalk.crosswalk_metadata(item)[DATACITE_PUBLICATION_YEAR] == '2016'

    def test_target(self, crosswalk):
        item = ItemFactory(handle='123456789/42')
        assert crosswalk.crosswalk_metadata(item)[TARGET] == '{}/handle/123456789/42'.format(SITE_URL)

    def test_no_handle_no_target(self, crosswalk, caplog):
        item = ItemFactory(handle=None)
        with caplog.at_level(logging.WARNING):
            mapped = crosswalk.crosswalk_metadata(item)
        assert TARGET not in mapped
        assert 'has no handle' in caplog.text

    def test_does_not_touch_item(self, crosswalk):
        item = ItemFactory()
        before = list(item.metadata)
        crosswalk.crosswalk_metadata(item)
        assert item.metadata == before
        assert item.updates == 0

    def test_mapping_is_read_only(self, crosswalk):
        with pytest.raises(TypeError):
            crosswalk.crosswalk['datacite.title'] = 'dc.title.alternative'

    def test_requires_item(self, crosswalk):
        with pytest.raises(ValueError):
            crosswalk.crosswalk_metadata(None)


class TestDataCiteDocument:

    @pytest.fixture()
    def fake_disseminator(self):
        @datacite.register('Fake')
        class FakeCrosswalk(datacite.DisseminationCrosswalk):
            def disseminate(self, item):
                return '<resource/>'

        yield FakeCrosswalk
        datacite.crosswalk_registry.pop('Fake')

    def test_document_suppresses_defaults(self, configuration, clock, fake_disseminator):
        crosswalk = MetadataCrosswalk(
            configuration, CROSSWALK, generate_datacite_xml=True,
            dissemination_crosswalk_name='Fake', clock=clock,
        )
        mapped = crosswalk.crosswalk_metadata(ItemFactory(metadata=[], handle='1/2'))
        assert mapped[DATACITE_DOCUMENT] == '<resource/>'
        assert DATACITE_PUBLISHER not in mapped
        assert DATACITE_PUBLICATION_YEAR not in mapped
        assert mapped[TARGET] == '{}/handle/1/2'.format(SITE_URL)

    def test_disabled_by_default(self, configuration, clock):
        crosswalk = MetadataCrosswalk(configuration, CROSSWALK, clock=clock)
        assert DATACITE_DOCUMENT not in crosswalk.crosswalk_metadata(ItemFactory())

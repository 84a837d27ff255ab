import logging

import furl
import requests
from requests.exceptions import RequestException

from doiprovider import settings
from doiprovider.exceptions import EzidRequestError
from doiprovider.identifiers.base import DOI
from doiprovider.identifiers.utils import from_anvl, to_anvl

logger = logging.getLogger(__name__)

ENCODING = 'UTF-8'


class EzidResponse(object):
    """Normalized EZID answer.

    The HTTP layer (``http_status_code``, ``http_reason_phrase``) and the EZID
    layer (``success``, ``ezid_status_value``) are reported separately;
    either can fail while the other looks fine.
    """

    def __init__(self, http_status_code, http_reason_phrase, body):
        self.http_status_code = http_status_code
        self.http_reason_phrase = http_reason_phrase
        self.body = body or ''

        lines = self.body.splitlines()
        # First line is "status: message or value"; the rest is ANVL metadata
        first = lines[0] if lines else ''
        status, _, value = first.partition(':')
        self.status = status.strip()
        self.ezid_status_value = value.strip() or None
        self.metadata = from_anvl('\n'.join(lines[1:]))

    @classmethod
    def from_response(cls, response):
        return cls(response.status_code, response.reason, response.text)

    @property
    def success(self):
        return self.status.lower() == 'success'

    def __repr__(self):
        return '<EzidResponse {} {}: {}>'.format(
            self.http_status_code, self.status, self.ezid_status_value
        )


class EzidRequest(object):
    """Requests against one EZID account and shoulder (authority)."""

    MINT_PATH = 'shoulder'
    ID_PATH = 'id'

    def __init__(self, base_url, authority, username, password, timeout=None, session=None):
        self.base_url = furl.furl(base_url)
        self.authority = authority
        self.username = username
        self.password = password
        self.timeout = timeout
        self.session = session or requests

    @property
    def _default_headers(self):
        return {
            'Content-Type': 'text/plain; charset={}'.format(ENCODING),
            'Accept': 'text/plain',
        }

    def _url(self, *path):
        url = self.base_url.copy()
        for segment in path:
            url.path.add(segment)
        return url.url

    def _identifier_path(self, name):
        if name.startswith(DOI.SCHEME):
            return name
        return '{}{}{}'.format(DOI.SCHEME, self.authority, name)

    def _send(self, method, url, metadata=None):
        data = None
        if metadata is not None:
            data = to_anvl(metadata).encode(ENCODING)
        logger.debug('EZID %s %s', method, url)
        try:
            response = self.session.request(
                method,
                url,
                data=data,
                headers=self._default_headers,
                auth=(self.username, self.password),
                timeout=self.timeout,
            )
        except RequestException as e:
            raise EzidRequestError(reason='{} {} failed:  {}'.format(method, url, e))
        return EzidResponse.from_response(response)

    def mint(self, metadata):
        """Ask EZID for a new identifier under our shoulder."""
        url = self._url(self.MINT_PATH, '{}{}'.format(DOI.SCHEME, self.authority))
        return self._send('POST', url, metadata)

    def create(self, name, metadata):
        """Register exactly ``name`` (local part, or a full ``doi:`` value)."""
        return self._send('PUT', self._url(self.ID_PATH, self._identifier_path(name)), metadata)

    def delete(self, name):
        return self._send('DELETE', self._url(self.ID_PATH, self._identifier_path(name)))


class EzidRequestFactory(object):
    """Shared, stateless maker of EzidRequest objects for one EZID endpoint."""

    def __init__(self, scheme=None, host=None, path=None, timeout=None, session=None):
        self.scheme = scheme or settings.EZID_SCHEME
        self.host = host or settings.EZID_HOST
        self.path = settings.EZID_PATH if path is None else path
        self.timeout = settings.EZID_TIMEOUT if timeout is None else timeout
        self.session = session

    @property
    def base_url(self):
        url = furl.furl('{}://{}'.format(self.scheme, self.host))
        if self.path:
            url.path.add(self.path)
        return url.url

    def get_instance(self, authority, username, password):
        return EzidRequest(
            self.base_url, authority, username, password,
            timeout=self.timeout, session=self.session,
        )

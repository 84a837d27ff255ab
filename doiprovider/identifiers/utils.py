import re

FIELD_SEPARATOR = '\n'
PAIR_SEPARATOR = ': '

KEY_ESCAPE_RE = re.compile(r'[%:\r\n]')
VALUE_ESCAPE_RE = re.compile(r'[%\r\n]')
UNESCAPE_RE = re.compile(r'%[0-9A-Fa-f]{2}')


def encode(match):
    return '%{:02X}'.format(ord(match.group()))


def decode(match):
    return chr(int(match.group().lstrip('%'), 16))


def escape_key(key):
    return KEY_ESCAPE_RE.sub(encode, key)


def escape_value(value):
    return VALUE_ESCAPE_RE.sub(encode, value)


def unescape(value):
    return UNESCAPE_RE.sub(decode, value)


def to_anvl(data):
    """Encode a flat mapping as EZID's ANVL line format.

    >>> to_anvl({'datacite.title': 'Line one\\nline two'})
    'datacite.title: Line one%0Aline two'
    """
    return FIELD_SEPARATOR.join(
        PAIR_SEPARATOR.join([escape_key(key), escape_value(str(value))])
        for key, value in data.items()
    )


def _field_from_anvl(raw):
    key, _, value = raw.partition(':')
    return unescape(key).strip(), unescape(value).strip()


def from_anvl(data):
    return dict(
        _field_from_anvl(line)
        for line in data.splitlines()
        if line.strip()
    )


def item_url(site_url, handle):
    """Back-reference URL for an item with a persistent handle."""
    return '{}/handle/{}'.format(site_url.rstrip('/'), handle)

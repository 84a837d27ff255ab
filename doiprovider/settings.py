import os

# Sentry and debug mode
DEBUG_MODE = os.environ.get('DOIPROVIDER_DEBUG_MODE', 'false').lower() in ('1', 'true', 'yes', 'on')
SENTRY_DSN = os.environ.get('SENTRY_DSN') or None

# EZID endpoint
EZID_SCHEME = os.environ.get('EZID_SCHEME', 'https')
EZID_HOST = os.environ.get('EZID_HOST', 'ezid.cdlib.org')
EZID_PATH = os.environ.get('EZID_PATH', '')
# None means block until EZID answers
EZID_TIMEOUT = float(os.environ['EZID_TIMEOUT']) if os.environ.get('EZID_TIMEOUT') else None

# Configuration property names
CFG_SHOULDER = 'identifier.doi.ezid.shoulder'
CFG_USER = 'identifier.doi.ezid.user'
CFG_PASSWORD = 'identifier.doi.ezid.password'
CFG_PUBLISHER = 'identifier.doi.ezid.publisher'
CFG_SITE_URL = 'site.url'

DEFAULT_PUBLISHER = 'unknown'
DEFAULT_DISSEMINATION_CROSSWALK = 'DataCite'

# subhost-specific configuration options
# storage backend (where do uploaded namespaces live?)
STORAGE_BACKEND = {
    'name': 'file',
    'uploads_root': 'tmp/uploads',
}

# domain which namespaces are subdomains of; `acme.localhost` resolves to
# 127.0.0.1 on most systems, which makes local testing easy
DOMAIN = 'localhost'

# URL patterns
HOME_URL = 'http://localhost:5000/'
NAMESPACE_URL = 'http://{name}.localhost:5000/'

# labels which never name a namespace, in addition to www, localhost, 127
# and the apex label of DOMAIN
RESERVED_LABELS = frozenset()

# file served for directory requests
INDEX_FILE = 'index.html'

CORS_ALLOW_ORIGIN = '*'

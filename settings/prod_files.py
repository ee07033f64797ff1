# subhost-specific configuration options
# storage backend (where do uploaded namespaces live?)
STORAGE_BACKEND = {
    "name": "file",
    "uploads_root": "/srv/subhost/uploads",
}

# domain which namespaces are subdomains of; DNS needs a wildcard record
# (*.domainfreecode.com) pointing at the reverse proxy in front of this app
DOMAIN = "domainfreecode.com"

# URL patterns
HOME_URL = "https://domainfreecode.com/"
NAMESPACE_URL = "https://{name}.domainfreecode.com/"

# labels which never name a namespace, in addition to www, localhost, 127
# and the apex label of DOMAIN
RESERVED_LABELS = frozenset(("api", "mail"))

# file served for directory requests
INDEX_FILE = "index.html"

CORS_ALLOW_ORIGIN = "*"

# how long browsers may cache served files (in seconds)
SEND_FILE_MAX_AGE_DEFAULT = 300

"""Map request hosts onto namespace keys.

The leftmost label of the host names the namespace, so a request for
`acme.example.com:3000` belongs to the namespace `acme`. Labels which can
never name a namespace (the apex, `www`, loopback hosts) are reserved.

Nothing here touches the disk; whether a namespace actually exists is decided
later by looking for its directory.
"""
import typing


DEFAULT_RESERVED_LABELS = frozenset(('www', 'localhost', '127'))

# Host labels never contain a dot, so rejecting dots also rejects `..`.
FORBIDDEN_KEY_CHARS = ('/', '\\', '\0', '.', ':')


def reserved_labels(
    domain: typing.Optional[str],
    extra: typing.Iterable[str] = (),
) -> typing.FrozenSet[str]:
    """Return the reserved labels for a deployment on `domain`.

    The apex label (`example` for `example.com`) is reserved so that requests
    to the bare domain reach the app itself.
    """
    labels = set(DEFAULT_RESERVED_LABELS)
    labels.update(extra)
    if domain:
        labels.add(domain.split('.', 1)[0])
    labels.discard('')
    return frozenset(labels)


def is_valid_key(
    key: typing.Optional[str],
    reserved: typing.Collection[str] = DEFAULT_RESERVED_LABELS,
) -> bool:
    return (
        bool(key) and
        key not in reserved and
        not any(c in key for c in FORBIDDEN_KEY_CHARS)
    )


def _hostname(host: str) -> str:
    host = host.strip()
    if host.startswith('['):
        # IPv6 literal
        return ''
    hostname, _, _ = host.partition(':')
    return hostname


def resolve(
    host: typing.Optional[str],
    reserved: typing.Collection[str] = DEFAULT_RESERVED_LABELS,
) -> typing.Optional[str]:
    """Return the namespace key for a host header, or None.

    The key is case-sensitive; `Acme.example.com` and `acme.example.com` are
    different namespaces.
    """
    if not host or not isinstance(host, str):
        return None

    label = _hostname(host).split('.', 1)[0]
    if is_valid_key(label, reserved):
        return label
    else:
        return None

import io
import uuid

import requests


PLAINTEXT_TESTCASES = (
    '',
    '\t\t\t',
    '    ',
    'hello world',
    'éóñəå  ⊂(◉‿◉)つ(ノ≥∇≤)ノ',
    'hello\nworld\n',
)

BINARY_TESTCASES = (
    b'hello world\00',
    b'\x43\x92\xd9\x0f\xaf\x32\x2c\x00\x12\x23',
    b'\x11\x22\x33\x44\x55',
)

FILE_CONTENT_TESTCASES = tuple(
    content.encode('utf8')
    for content in PLAINTEXT_TESTCASES
) + BINARY_TESTCASES


def random_key():
    """Return a namespace key no other test uses."""
    return 'ns' + uuid.uuid4().hex[:12]


def upload(home, key, files):
    """Upload `files` (a dict of name to bytes) into the namespace `key`."""
    return requests.post(
        home + '/upload',
        data={'subdomain': key},
        files=[
            ('files', (name, io.BytesIO(content), None, None))
            for name, content in files.items()
        ],
    )


def get_from_namespace(home, key, path='/', **kwargs):
    """GET `path` from the app while pretending to be `key`'s subdomain."""
    headers = kwargs.pop('headers', {})
    headers['Host'] = f'{key}.example.com'
    return requests.get(home + path, headers=headers, **kwargs)


def assert_namespace_serves(home, key, path, content):
    req = get_from_namespace(home, key, path)
    assert req.status_code == 200
    assert req.content == content

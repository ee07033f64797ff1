import tempfile
import urllib.parse
from collections import namedtuple
from contextlib import contextmanager

from cached_property import cached_property

from subhost.app import app


def is_plain_file_name(name):
    """Return whether `name` names a file directly inside a directory."""
    return (
        bool(name) and
        name not in ('.', '..') and
        not any(c in name for c in ('/', '\\', '\0'))
    )


class UploadedFile(
    namedtuple(
        'UploadedFile',
        (
            'namespace',
            'human_name',
            'num_bytes',
            'open_file',
        ),
    ),
):

    def __new__(cls, *args, **kwargs):
        uf = super().__new__(cls, *args, **kwargs)
        if not is_plain_file_name(uf.human_name):
            raise InvalidFilenameError(uf.human_name)
        else:
            return uf

    @classmethod
    @contextmanager
    def from_http_file(cls, f, namespace):
        with tempfile.NamedTemporaryFile() as tf:
            # The client can lie about the uploaded size, so count what we
            # actually receive.
            f.save(tf)
            num_bytes = tf.tell()
            tf.seek(0)

            yield cls(
                namespace=namespace,
                human_name=f.filename,
                num_bytes=num_bytes,
                open_file=tf,
            )

    @property
    def name(self):
        """File name that will be stored."""
        return self.human_name

    @cached_property
    def url(self):
        return app.config['NAMESPACE_URL'].format(name=self.namespace) + urllib.parse.quote(self.name)


class InvalidFilenameError(Exception):
    pass

"""Storage backends for uploaded files.

A namespace is a directory under the uploads root; uploading a file writes it
into that directory, replacing any file that already has the same name. The
static server reads the same directories, so every write must be atomic.
"""
import contextlib
import functools
import os
import shutil
import tempfile

from subhost.app import app
from subhost.models import UploadedFile


class FileBackend:
    """Storage backend which stores namespace files on the local disk."""

    @property
    def uploads_root(self) -> str:
        return app.config['STORAGE_BACKEND']['uploads_root']

    def namespace_root(self, key: str) -> str:
        return os.path.join(self.uploads_root, key)

    def store_object(self, obj: UploadedFile) -> None:
        root = self.namespace_root(obj.namespace)
        os.makedirs(root, exist_ok=True)

        # Write next to the destination and rename into place, so readers
        # see either the old file or the new one.
        fd, tmp_path = tempfile.mkstemp(dir=root, prefix='.upload-')
        try:
            with os.fdopen(fd, 'wb') as f:
                shutil.copyfileobj(obj.open_file, f)
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, os.path.join(root, obj.name))
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_path)
            raise
        finally:
            obj.open_file.seek(0)


@functools.lru_cache()
def get_backend():
    """Return current backend."""
    return {
        'file': FileBackend,
    }[app.config['STORAGE_BACKEND']['name']]()

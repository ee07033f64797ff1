"""Serve uploaded files out of namespace directories.

Each namespace lives in its own directory under the uploads root. A request
path is resolved inside that directory the way a static file server would:
directories get their index file, anything missing is a 404, and nothing
outside the namespace directory is ever served.
"""
import logging
import mimetypes
import os
import stat
import typing
import urllib.parse

from flask import redirect
from flask import request
from flask import send_file
from identify import identify
from werkzeug.exceptions import NotFound
from werkzeug.security import safe_join
from werkzeug.wrappers import Response


logger = logging.getLogger(__name__)


def guess_mimetype(path: str) -> str:
    mime, _ = mimetypes.guess_type(path)
    if mime:
        return mime
    elif identify.file_is_text(path):
        return 'text/plain'
    else:
        return 'application/octet-stream'


def _is_within(root: str, path: str) -> bool:
    real_root = os.path.realpath(root)
    real_path = os.path.realpath(path)
    return os.path.commonpath((real_root, real_path)) == real_root


def _redirect_to_directory(request_path: str) -> Response:
    """Redirect `/docs` to `/docs/` so relative links in its index resolve."""
    location = urllib.parse.quote(request_path + '/')
    if request.query_string:
        location += '?' + request.query_string.decode('latin-1')
    return redirect(location, code=301)


def _stat(path: str) -> typing.Optional[os.stat_result]:
    """Stat a path, returning None if it doesn't exist.

    Errors other than a missing entry are storage faults.
    """
    try:
        return os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return None
    except OSError as ex:
        raise StorageFaultError(path) from ex


class NamespaceServer:
    """Static file server for the namespaces under one uploads root.

    Instances hold no per-request state and can be shared between threads.
    """

    def __init__(self, uploads_root: str, index_file: str = 'index.html') -> None:
        self.uploads_root = os.path.abspath(uploads_root)
        self.index_file = index_file

    def namespace_root(self, key: str) -> typing.Optional[str]:
        """Return the directory for `key` if the namespace exists."""
        path = os.path.join(self.uploads_root, key)
        st = _stat(path)
        if st is None or not stat.S_ISDIR(st.st_mode):
            return None
        if not _is_within(self.uploads_root, path):
            logger.warning('Rejected namespace %r: path traversal outside the uploads root', key)
            return None
        return path

    def check_contained(
        self,
        key: str,
        root: str,
        path: typing.Optional[str],
        request_path: str,
    ) -> None:
        if path is None or not _is_within(root, path):
            logger.warning(
                'Rejected path traversal attempt in namespace %r: %r',
                key,
                request_path,
            )
            raise NotFound()

    def resolve_path(self, key: str, root: str, request_path: str) -> str:
        relative = request_path.lstrip('/')
        if '\0' in relative:
            raise NotFound()
        path = safe_join(root, relative) if relative else root
        self.check_contained(key, root, path, request_path)

        # Hidden files include in-progress uploads, which may be partial.
        parts = os.path.relpath(path, root).split(os.sep)
        if any(part.startswith('.') and part != '.' for part in parts):
            logger.debug('Refusing to serve hidden path %r in namespace %r', request_path, key)
            raise NotFound()
        return path

    def serve(self, key: str, request_path: str) -> typing.Optional[Response]:
        """Serve `request_path` from the namespace `key`.

        Returns None if the namespace doesn't exist, so that the request can
        be handled by something else. Raises NotFound if the namespace exists
        but the file doesn't, and StorageFaultError if the disk misbehaves.
        Must be called inside a Flask request context.
        """
        root = self.namespace_root(key)
        if root is None:
            logger.debug('No namespace for key %r', key)
            return None

        path = self.resolve_path(key, root, request_path)
        st = _stat(path)
        if st is not None and stat.S_ISDIR(st.st_mode):
            if request_path.lstrip('/') and not request_path.endswith('/'):
                return _redirect_to_directory(request_path)
            path = os.path.join(path, self.index_file)
            self.check_contained(key, root, path, request_path)
            st = _stat(path)
        if st is None or not stat.S_ISREG(st.st_mode):
            raise NotFound()

        try:
            return send_file(
                path,
                mimetype=guess_mimetype(path),
                conditional=True,
                etag=True,
            )
        except FileNotFoundError:
            # removed since we looked
            raise NotFound()
        except OSError as ex:
            raise StorageFaultError(path) from ex


class StorageFaultError(Exception):
    pass

import concurrent.futures
import contextlib
import functools
import typing

from flask import jsonify
from flask import request

from subhost.app import app
from subhost.component.backends import get_backend
from subhost.component.resolver import is_valid_key
from subhost.component.resolver import reserved_labels
from subhost.component.resolver import resolve
from subhost.component.serving import NamespaceServer
from subhost.component.serving import StorageFaultError
from subhost.models import InvalidFilenameError
from subhost.models import UploadedFile
from subhost.utils import human_size
from subhost.utils import pluralize


@functools.lru_cache()
def get_reserved_labels():
    return reserved_labels(
        app.config['DOMAIN'],
        app.config.get('RESERVED_LABELS', ()),
    )


@functools.lru_cache()
def get_namespace_server():
    return NamespaceServer(
        app.config['STORAGE_BACKEND']['uploads_root'],
        index_file=app.config.get('INDEX_FILE', 'index.html'),
    )


@app.before_request
def serve_namespace():
    """Answer requests for a namespace host out of its uploaded files.

    Hosts which don't map to an existing namespace fall through to the
    regular routes below.
    """
    if request.method not in ('GET', 'HEAD'):
        return None

    key = resolve(request.host, get_reserved_labels())
    if key is None:
        return None

    return get_namespace_server().serve(key, request.path)


@app.errorhandler(StorageFaultError)
def storage_fault(ex):
    path, = ex.args
    app.logger.error('Storage fault while serving %s', path, exc_info=ex)
    return jsonify({
        'success': False,
        'error': 'The file could not be read.',
    }), 500


@app.route('/')
def home():
    return (
        'subhost backend for {} is running!'.format(app.config['DOMAIN']),
        200,
        {'Content-Type': 'text/plain; charset=utf-8'},
    )


def store_objects(objects: typing.Sequence[UploadedFile]) -> None:
    with concurrent.futures.ThreadPoolExecutor() as ex:
        for future in concurrent.futures.as_completed([
            ex.submit(get_backend().store_object, obj) for obj in objects
        ]):
            future.result()


@app.route('/upload', methods={'POST'})
def upload():
    """Store uploaded files in a namespace and return JSON status."""
    key = request.form.get('subdomain', '')
    if not key:
        return jsonify({
            'success': False,
            'error': 'No subdomain was provided.',
        }), 400
    if not is_valid_key(key, get_reserved_labels()):
        return jsonify({
            'success': False,
            'error': f'"{key}" cannot be used as a subdomain.',
        }), 400

    with contextlib.ExitStack() as ctx:
        objects = []

        for f in request.files.getlist('files'):
            # Browsers send an empty part when no file was picked.
            if not f.filename:
                continue
            try:
                objects.append(ctx.enter_context(UploadedFile.from_http_file(f, key)))
            except InvalidFilenameError as ex:
                filename, = ex.args
                return jsonify({
                    'success': False,
                    'error': f'"{filename}" is not a valid file name.',
                }), 400

        store_objects(objects)

    app.logger.info(
        'Stored %d %s (%s) in namespace %r',
        len(objects),
        pluralize('file', len(objects)),
        human_size(sum(uf.num_bytes for uf in objects)),
        key,
    )
    return jsonify({
        'success': True,
        'message': 'Files uploaded successfully!',
        'url': app.config['NAMESPACE_URL'].format(name=key),
        'uploaded_files': [
            {
                'name': uf.human_name,
                'bytes': uf.num_bytes,
                'url': uf.url,
            }
            for uf in objects
        ],
    })

import os
import shutil
import signal
import subprocess
import sys
import tempfile
import time
from pathlib import Path
from unittest import mock

import ephemeral_port_reserve
import pytest
import requests


PROJECT_ROOT = Path(__file__).parent.parent

# The app reads its settings at import time, so the unit tests need a settings
# file before any test module imports it.
UNIT_TEMPDIR = tempfile.mkdtemp()


def _templated_config(tempdir, app_port):
    with (PROJECT_ROOT / 'settings' / 'test_files.py').open('r') as f:
        return f.read().format(
            uploads_root=os.path.join(tempdir, 'uploads'),
            home_url=f'http://localhost:{app_port}/',
        )


def _write_config(tempdir, app_port):
    settings_path = os.path.join(tempdir, 'settings.py')
    with open(settings_path, 'w') as f:
        f.write(_templated_config(tempdir, app_port))
    return settings_path


os.environ['SUBHOST_SETTINGS'] = _write_config(UNIT_TEMPDIR, 5000)


def pytest_unconfigure(config):
    shutil.rmtree(UNIT_TEMPDIR, ignore_errors=True)


def _wait_for_http(url):
    for _ in range(500):
        try:
            req = requests.get(url)
        except requests.exceptions.ConnectionError:  # pragma: no cover
            pass
        else:
            if req.status_code == 200:
                break
        time.sleep(0.01)  # pragma: no cover
    else:  # pragma: no cover
        raise RuntimeError(f'Timed out trying to access: {url}')


@pytest.fixture
def uploads_root(tmp_path):
    """Point the app at an empty uploads root for the duration of a test."""
    from subhost.run import app
    from subhost.views import get_namespace_server

    root = tmp_path / 'uploads'
    root.mkdir()
    with mock.patch.dict(
        app.config,
        {'STORAGE_BACKEND': {'name': 'file', 'uploads_root': str(root)}},
    ):
        get_namespace_server.cache_clear()
        yield root
    get_namespace_server.cache_clear()


@pytest.fixture
def client(uploads_root):
    from subhost.run import app
    return app.test_client()


@pytest.fixture(scope='session')
def running_server():
    """A running subhost server.

    Starts gunicorn on an ephemeral port with a fresh uploads root.
    """
    tempdir = tempfile.mkdtemp()
    os.mkdir(os.path.join(tempdir, 'uploads'))

    app_port = ephemeral_port_reserve.reserve()
    settings_path = _write_config(tempdir, app_port)

    app_server = subprocess.Popen(
        (
            sys.executable,
            '-m', 'gunicorn.app.wsgiapp',
            '-b', f'127.0.0.1:{app_port}',
            '--threads', '4',
            'subhost.run:app',
        ),
        env={
            'COVERAGE_PROCESS_START': os.environ.get('COVERAGE_PROCESS_START', ''),
            'PYTHONPATH': str(PROJECT_ROOT),
            'SUBHOST_SETTINGS': settings_path,
        },
    )

    _wait_for_http(f'http://127.0.0.1:{app_port}')

    yield {
        'home': f'http://127.0.0.1:{app_port}',
        'uploads_root': Path(tempdir) / 'uploads',
    }

    app_server.send_signal(signal.SIGTERM)
    assert app_server.wait() == 0, app_server.returncode

    shutil.rmtree(tempdir)

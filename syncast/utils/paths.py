import hashlib
import os
import sys
import tempfile
from pathlib import Path


APP_DIR_NAME = 'SynCast'


def _test_data_dir() -> str:
    """Per-test directory so feeds.txt/history.txt never leak between tests."""
    test_id = os.environ.get('SYNCAST_TEST_ID')
    run_id = os.environ.get('SYNCAST_TEST_RUN_ID') or f"pid-{os.getpid()}"
    if not test_id:
        # Strip the phase suffix like " (call)"
        current = os.environ.get('PYTEST_CURRENT_TEST')
        if current:
            test_id = current.split(' ')[0]
    digest = hashlib.sha1((test_id or f"pid-{os.getpid()}").encode('utf-8', errors='ignore')).hexdigest()[:12]
    return os.path.join(tempfile.gettempdir(), 'SynCastTests', run_id, digest)


def get_user_data_path(filename: str) -> str:
    if os.environ.get('PYTEST_CURRENT_TEST') or os.environ.get('SYNCAST_TESTS'):
        base = _test_data_dir()
        os.makedirs(base, exist_ok=True)
        return os.path.join(base, filename)
    if getattr(sys, 'frozen', False):
        if sys.platform == 'darwin':
            return os.path.join(Path.home(), 'Library', 'Application Support', APP_DIR_NAME, filename)
        elif sys.platform == 'win32':
            return os.path.join(os.getenv('APPDATA') or str(Path.home()), APP_DIR_NAME, filename)
        else:
            return os.path.join(Path.home(), '.syncast', filename)
    # Source runs keep their files next to the working directory
    return os.path.join(os.path.abspath('.'), filename)

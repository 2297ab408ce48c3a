from __future__ import annotations

import hashlib
import os
import sys
import tempfile
from typing import Any, Optional, Type

from PyQt5.QtCore import QSettings


PROD_ORG = 'syncast'
PROD_APP = 'SynCast'
DEV_ORG = 'syncast-dev'
DEV_APP = 'SynCast-Dev'

DEFAULTS = {
    'log_level': 'INFO',
    'player_command': 'mpv',
    'fetch_workers': 8,
    'fetch_connect_timeout': 5,
    'fetch_read_timeout': 15,
}


def _under_tests() -> bool:
    return bool(os.environ.get('SYNCAST_TESTS') or os.environ.get('PYTEST_CURRENT_TEST'))


def is_dev_mode() -> bool:
    """Return True if a separate dev profile should be used.

    Enabled when:
    - SYNCAST_DEV=1 environment variable is set
    - Process argv contains '--debug'
    """
    if os.environ.get('SYNCAST_DEV') == '1':
        return True
    return '--debug' in (sys.argv or [])


def qsettings() -> QSettings:
    """Return QSettings instance for the proper profile (test/dev/prod)."""
    # Under pytest we must not touch real user settings.
    if _under_tests():
        test_id = os.environ.get('SYNCAST_TEST_ID') or os.environ.get('PYTEST_CURRENT_TEST') or f"pid-{os.getpid()}"
        run_id = os.environ.get('SYNCAST_TEST_RUN_ID') or f"pid-{os.getpid()}"
        digest = hashlib.sha1(str(test_id).encode('utf-8', errors='ignore')).hexdigest()[:12]
        base = os.path.join(tempfile.gettempdir(), 'SynCastTests', run_id, 'qsettings')
        os.makedirs(base, exist_ok=True)
        return QSettings(os.path.join(base, f'settings-{digest}.ini'), QSettings.IniFormat)
    if is_dev_mode():
        return QSettings(DEV_ORG, DEV_APP)
    return QSettings(PROD_ORG, PROD_APP)


def get_setting(key: str, default: Any = None, typ: Optional[Type] = str) -> Any:
    if default is None:
        default = DEFAULTS.get(key)
    try:
        settings = qsettings()
        if typ is None:
            return settings.value(key, default)
        return settings.value(key, default, type=typ)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        # Stored value does not convert to the requested type
        return default


def set_setting(key: str, value: Any) -> None:
    settings = qsettings()
    settings.setValue(key, value)
    settings.sync()

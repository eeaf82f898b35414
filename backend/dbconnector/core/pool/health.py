"""
Connection liveness probe.
"""

import logging
from typing import Any

_log = logging.getLogger(__name__)


def health_check(conn: Any) -> bool:
    """
    Run SELECT 1 and return True if no exception. Postgres, MySQL and Trino all support SELECT 1.
    """
    cur = None
    try:
        cur = conn.cursor()
        cur.execute("SELECT 1")
        cur.fetchone()
        return True
    except Exception:
        _log.debug("Liveness probe failed", exc_info=True)
        return False
    finally:
        if cur is not None:
            try:
                cur.close()
            except Exception:
                _log.debug("Failed to close probe cursor", exc_info=True)

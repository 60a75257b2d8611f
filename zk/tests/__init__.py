"""
zk.tests helpers

- configure_test_logging(): enable INFO logging for zk.* when ZK_TEST_LOG=1
"""

from __future__ import annotations

import logging
import os


def configure_test_logging() -> None:
    if os.environ.get("ZK_TEST_LOG", "").strip().lower() in ("1", "true", "yes", "on"):
        logging.basicConfig(level=logging.INFO)
        logging.getLogger("zk").setLevel(logging.INFO)

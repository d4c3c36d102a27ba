"""Example: ship the root logger's records to Application Insights.

    APPINSIGHTS_INSTRUMENTATIONKEY=... APPINSIGHTS_ROLE_NAME=my_client python main.py
"""

import logging
import signal
import sys
import threading

from logging_appinsights.config import load_config
from logging_appinsights.handler import AppInsightsHandler
from logging_appinsights.hook import AppInsightsHook
from logging_appinsights.levels import Level


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        stream=sys.stderr,
    )
    logger = logging.getLogger(__name__)

    config = load_config()
    hook = AppInsightsHook(config)
    hook.set_levels([Level.PANIC, Level.FATAL, Level.ERROR])
    hook.add_ignore("private")

    handler = AppInsightsHandler(hook)
    logging.getLogger().addHandler(handler)

    shutdown_event = threading.Event()

    def signal_handler(signum, frame):
        logger.info("Received signal %d, shutting down...", signum)
        shutdown_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    fields = {
        "field1": "field1_value",
        "field2": "field2_value",
        "private": "private_value",
    }
    try:
        while not shutdown_event.is_set():
            logger.error("my message", extra=fields)
            shutdown_event.wait(1.0)
    finally:
        logging.getLogger().removeHandler(handler)
        handler.close()
        snapshot = hook.metrics.snapshot()
        logger.info("Hook finished: sent=%d, failed=%d",
                    snapshot["sent"], snapshot["transport_failed"])


if __name__ == "__main__":
    main()

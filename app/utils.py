# app/utils.py
import os
import logging
import time
from functools import wraps
from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"

def get_logger(name="realestate-stats"):
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(format=LOG_FORMAT, level=level)
    # driver heartbeat/topology chatter drowns out request logs below WARNING
    logging.getLogger("pymongo").setLevel(max(level, logging.WARNING))
    return logging.getLogger(name)

logger = get_logger()

def retry(exceptions, tries=3, delay=1, backoff=2, logger=logger):
    """Call the wrapped function up to `tries` times while it raises `exceptions`.

    Waits `delay` seconds after the first failure, multiplied by `backoff`
    after each further one. The final attempt is made unguarded so its
    exception reaches the caller.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            wait = delay
            for attempt in range(1, tries):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    logger.warning("%s attempt %d/%d failed: %s; next try in %ss",
                                   func.__name__, attempt, tries, e, wait)
                    time.sleep(wait)
                    wait *= backoff
            return func(*args, **kwargs)
        return wrapper
    return decorator

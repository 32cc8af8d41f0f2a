import logging

_FORMAT = "%(levelname)s %(asctime)s [%(filename)s:%(lineno)d] %(message)s"
_DATE_FORMAT = "%m-%d %H:%M:%S"

_root_logger = logging.getLogger("pqueue")
_default_handler = None


def _setup_logger():
    global _default_handler
    _root_logger.setLevel(logging.INFO)
    if _default_handler is None:
        _default_handler = logging.StreamHandler()
        _default_handler.setLevel(logging.DEBUG)
        _default_handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
        _root_logger.addHandler(_default_handler)
    _root_logger.propagate = False


_setup_logger()


def init_logger(name: str):
    """Return a logger that writes through the shared ``pqueue`` handler."""
    return _root_logger.getChild(name)


def set_log_level(level: str):
    _root_logger.setLevel(level.upper())

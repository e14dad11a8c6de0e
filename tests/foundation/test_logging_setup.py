import logging

import pytest

from mapo.foundation.logging import configure_mapo_logging


@pytest.fixture
def clean_mapo_logger():
    root = logging.getLogger()
    logger = logging.getLogger("mapo")
    saved_root = root.handlers[:]
    saved = (logger.handlers[:], logger.propagate, logger.level)
    root.handlers.clear()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    try:
        yield logger
    finally:
        root.handlers[:] = saved_root
        logger.handlers[:] = saved[0]
        logger.propagate = saved[1]
        logger.setLevel(saved[2])


def test_configure_attaches_single_handler(clean_mapo_logger):
    configure_mapo_logging(level=logging.DEBUG)
    configure_mapo_logging()

    assert len(clean_mapo_logger.handlers) == 1
    assert clean_mapo_logger.level == logging.DEBUG
    assert clean_mapo_logger.propagate is False


def test_configure_respects_existing_root_handlers(clean_mapo_logger):
    logging.getLogger().addHandler(logging.NullHandler())
    configure_mapo_logging()
    assert clean_mapo_logger.handlers == []

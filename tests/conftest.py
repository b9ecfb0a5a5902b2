from __future__ import annotations

import logging

import pytest

from tests._fixtures.dump_builder import DumpBuilder


@pytest.fixture
def dump_builder() -> DumpBuilder:
    """Provide an empty dump builder."""
    return DumpBuilder()


@pytest.fixture(autouse=True)
def _reset_compdoc_logger():
    """Drop handlers a test installed on the ``compdoc`` logger."""
    yield
    logger = logging.getLogger("compdoc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True

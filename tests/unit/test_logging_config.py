"""Tests for docrepo/infrastructure/logging_config.py."""

import logging

import pytest

from docrepo.infrastructure.config import Settings
from docrepo.infrastructure.logging_config import configure_logging


@pytest.fixture
def docrepo_logger():
    logger = logging.getLogger("docrepo")
    saved = (logger.level, list(logger.handlers), logger.propagate)
    yield logger
    logger.setLevel(saved[0])
    logger.handlers[:] = saved[1]
    logger.propagate = saved[2]


def test_configure_logging_sets_level(docrepo_logger):
    configure_logging(Settings(log_level="debug"))
    assert docrepo_logger.level == logging.DEBUG


def test_configure_logging_installs_console_handler(docrepo_logger):
    configure_logging(Settings(log_level="WARNING"))
    assert any(isinstance(h, logging.StreamHandler) for h in docrepo_logger.handlers)


def test_repository_loggers_stay_silent_by_default():
    from docrepo.domain.repositories import documents

    assert any(isinstance(h, logging.NullHandler) for h in documents.logger.handlers)

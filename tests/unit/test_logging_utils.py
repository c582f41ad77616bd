"""
Тесты для logging_utils

Проверяет иерархию логгеров 'hypernum' и debug-сообщения ядра.
"""

import logging

import pytest

from src.hypernum.logging_utils import ROOT_LOGGER_NAME, configure_logging, get_logger
from src.hypernum.logging_utils import _to_level
from src.hypernum.math.normalized_value import NormalizedValue


@pytest.fixture
def restore_hypernum_logger():
    """Восстанавливает состояние логгера 'hypernum' после теста."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    handlers, level, propagate = list(root.handlers), root.level, root.propagate
    yield root
    root.handlers = handlers
    root.setLevel(level)
    root.propagate = propagate


class TestLoggerHierarchy:
    """Тесты get_logger и configure_logging."""

    def test_names_are_prefixed(self):
        """Имена вне namespace получают префикс."""
        assert get_logger("ledger").name == "hypernum.ledger"
        assert get_logger("hypernum.value").name == "hypernum.value"
        assert get_logger("ledger") is get_logger("hypernum.ledger")

    def test_level_inherited_by_default(self):
        """Без явного уровня логгер наследует от 'hypernum'."""
        assert get_logger("audit").level == logging.NOTSET
        assert get_logger("audit", "warning").level == logging.WARNING

    def test_library_has_null_handler(self):
        """Пакет не пишет в stderr без configure_logging()."""
        import src.hypernum  # noqa: F401

        root = logging.getLogger(ROOT_LOGGER_NAME)
        assert any(isinstance(h, logging.NullHandler) for h in root.handlers)

    def test_configure_logging(self, restore_hypernum_logger):
        """Stream handler и уровень; корневой логгер процесса не трогается."""
        process_root_handlers = list(logging.getLogger().handlers)

        root = configure_logging("DEBUG")

        assert root.name == ROOT_LOGGER_NAME
        assert root.level == logging.DEBUG
        assert root.propagate is False
        assert any(isinstance(h, logging.StreamHandler) for h in root.handlers)
        assert logging.getLogger().handlers == process_root_handlers

    def test_level_parsing(self):
        """Строки, числа и мусор."""
        assert _to_level("warning") == logging.WARNING
        assert _to_level(logging.ERROR) == logging.ERROR
        assert _to_level("bogus") == logging.INFO
        assert _to_level(None, logging.DEBUG) == logging.DEBUG


class TestCoreDebugMessages:
    """Тесты debug-сообщений ядра."""

    def test_ledger_promotion_logged(self, caplog):
        """Продвижение bucket пишется в 'hypernum.ledger'."""
        caplog.set_level(logging.DEBUG, logger="hypernum.ledger")

        big = NormalizedValue.from_log(100)
        big.add(NormalizedValue(60.0, 2))
        big.add(NormalizedValue(50.0, 2))

        assert any(
            record.name == "hypernum.ledger" and "promote" in record.getMessage()
            for record in caplog.records
        )

    def test_collapse_logged(self, caplog):
        """collapse() пишется в 'hypernum.value'."""
        caplog.set_level(logging.DEBUG, logger="hypernum.value")

        NormalizedValue(5.0).collapse()

        assert any("collapsed" in record.getMessage() for record in caplog.records)

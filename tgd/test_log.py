import logging
import unittest

import structlog

import tgd
import tgd.log


class TestLog(unittest.TestCase):
    def tearDown(self):
        structlog.reset_defaults()
        logging.getLogger("tgd").setLevel(logging.NOTSET)

    def test_configure_json(self):
        tgd.log.configure(level="info", log_format="json")

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert logging.getLogger("tgd").level == logging.INFO

    def test_configure_console(self):
        tgd.log.configure(log_format="console")

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert logging.getLogger("tgd").level == logging.WARNING

    def test_get_logger_uses_stdlib(self):
        logger = tgd.log.get_logger("tgd.core.file")

        with self.assertLogs("tgd.core.file", level="WARNING") as captured:
            logger.warning("size_query_failed", path="missing")

        assert len(captured.records) == 1
        assert "size_query_failed" in captured.output[0]


if __name__ == "__main__":  # pragma: no cover
    unittest.main()

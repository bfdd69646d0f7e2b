import unittest
import logging
from logging.handlers import RotatingFileHandler

from app.config.logging_config import configure_logging, mask_secret


class TestLoggingConfig(unittest.TestCase):
    def test_configure_logging(self):
        # Test that the function returns a logger
        logger = configure_logging("INFO")
        self.assertIsInstance(logger, logging.Logger)

        # Test that the logger has the correct name
        self.assertEqual(logger.name, "voice_agent_relay")

        # Test that the logger has the correct level
        self.assertEqual(logger.level, logging.INFO)
        self.assertFalse(logger.propagate)

        # Console handler first, with the shared format
        self.assertGreaterEqual(len(logger.handlers), 1)
        handler = logger.handlers[0]
        self.assertIsInstance(handler, logging.StreamHandler)
        formatter = handler.formatter
        self.assertEqual(formatter._fmt, "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    def test_level_override(self):
        logger = configure_logging("debug")
        self.assertEqual(logger.level, logging.DEBUG)

    def test_reconfigure_does_not_duplicate_handlers(self):
        configure_logging()
        logger = configure_logging()
        console = [h for h in logger.handlers if not isinstance(h, RotatingFileHandler)]
        self.assertEqual(len(console), 1)


class TestMaskSecret(unittest.TestCase):
    def test_missing(self):
        self.assertEqual(mask_secret(None), "Missing")
        self.assertEqual(mask_secret(""), "Missing")

    def test_short_values_are_hidden(self):
        self.assertEqual(mask_secret("sk_123"), "***")

    def test_prefix_is_kept(self):
        self.assertEqual(mask_secret("sk_0123456789abcdef"), "sk_0123456...")
        self.assertEqual(mask_secret("0123456789abcdefghijklmnop", 20), "0123456789abcdefghij...")


if __name__ == "__main__":
    unittest.main()

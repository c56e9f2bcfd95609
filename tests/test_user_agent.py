"""Tests for log_normalizer/user_agent.py"""

import unittest

from log_normalizer.models import UserAgent
from log_normalizer.user_agent import decompose_user_agent


class TestDecomposeUserAgent(unittest.TestCase):
    def test_chrome_windows(self):
        ua = decompose_user_agent("Mozilla/5.0 (Windows NT 10.0) Chrome/99")
        self.assertEqual(ua, UserAgent(browser="Chrome 99", os="Windows NT 10.0", device="Desktop"))

    def test_firefox_linux(self):
        ua = decompose_user_agent(
            "Mozilla/5.0 (X11; Linux x86_64; rv:109.0) Gecko/20100101 Firefox/115.0"
        )
        self.assertEqual(ua.browser, "Firefox 115")
        self.assertEqual(ua.os, "Linux x86_64")
        self.assertEqual(ua.device, "Desktop")

    def test_iphone_safari(self):
        ua = decompose_user_agent(
            "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
            "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
        )
        self.assertEqual(ua.browser, "Safari 604")
        self.assertEqual(ua.os, "Mac OS X")
        self.assertEqual(ua.device, "iPhone")

    def test_android_mobile(self):
        ua = decompose_user_agent(
            "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
        )
        self.assertEqual(ua.browser, "Chrome 120")
        self.assertEqual(ua.os, "Linux")
        self.assertEqual(ua.device, "Android")

    def test_defaults_for_empty(self):
        self.assertEqual(decompose_user_agent(""),
                         UserAgent(browser="Unknown", os="Unknown", device="Desktop"))
        self.assertEqual(decompose_user_agent(None), UserAgent())

    def test_defaults_for_garbage(self):
        self.assertEqual(decompose_user_agent("curl/8.0"),
                         UserAgent(browser="Unknown", os="Unknown", device="Desktop"))

    def test_browser_version_must_be_ascii_digits(self):
        ua = decompose_user_agent("Mozilla/5.0 (X11; Linux x86_64) Chrome/٩٩")
        self.assertEqual(ua.browser, "Unknown")
        self.assertEqual(ua.os, "Linux x86_64")


if __name__ == "__main__":
    unittest.main()

"""Tests for paramsan.version module."""

import paramsan
from paramsan.version import PACKAGE_NAME, PACKAGE_VERSION


def test_package_info_is_exported():
    assert PACKAGE_NAME == "paramsan"
    assert paramsan.PACKAGE_NAME == PACKAGE_NAME
    assert paramsan.PACKAGE_VERSION == PACKAGE_VERSION
    assert isinstance(PACKAGE_VERSION, str) and PACKAGE_VERSION

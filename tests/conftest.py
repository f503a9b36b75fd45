# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Pytest configuration and fixtures."""

import pytest

from genro_tags.config import override_config


@pytest.fixture(autouse=True)
def restore_config():
    """Restore the process-wide configuration after each test.

    Tests that change the metadata suffix or class-name validation must
    not leak those changes into other tests.
    """
    with override_config():
        yield


@pytest.fixture
def unix_newlines():
    """Pretty rendering with '\\n' line separators regardless of platform."""
    with override_config(newline="\n") as config:
        yield config

"""Shared fixtures for hatunpack tests."""

from __future__ import annotations

import pytest

from builders import base_section, complex_container


@pytest.fixture
def png_bytes():
    """A small fake PNG payload."""
    return b"\x89PNG\r\n\x1a\n" + bytes(range(64))


@pytest.fixture
def hat_file(tmp_path, png_bytes):
    """A Complex `.hat` file with a plain base key on disk."""
    path = tmp_path / "team.hat"
    path.write_bytes(complex_container(base_section(402965919293045, "Ducks", png_bytes)))
    return path

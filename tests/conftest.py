"""
Pytest configuration and fixtures for Modwatch tests.
"""

import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock

import discord
import pytest

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))


class FakeUser:
    """Stand-in for discord.User / discord.Member with the bits Modwatch reads."""

    def __init__(self, user_id: int, name: str = "user", roles: tuple[int, ...] = ()) -> None:
        self.id = user_id
        self.name = name
        self.role_ids = set(roles)
        self.send = AsyncMock()
        self.remove_roles = AsyncMock()
        self.guild = None
        self.communication_disabled_until = None

    def get_role(self, role_id: int):
        return SimpleNamespace(id=role_id) if role_id in self.role_ids else None

    def __str__(self) -> str:
        return self.name


def make_http_error(cls=discord.HTTPException, status: int = 500, text: str = "boom"):
    """Build a discord HTTP exception without a real aiohttp response."""
    return cls(SimpleNamespace(status=status, reason=text), text)


@pytest.fixture
def fake_guild():
    return SimpleNamespace(
        id=1,
        name="TestGuild",
        get_member=lambda member_id: None,
        fetch_member=AsyncMock(),
    )


@pytest.fixture
def fake_notifier():
    return SimpleNamespace(
        send_log_embed=AsyncMock(return_value=True),
        send_direct_embed=AsyncMock(return_value=True),
    )

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def session():
    from bot.session import Session

    return Session(identity="PIZZABOT", flag="XX")


@pytest.fixture
def active_session(session):
    session.begin_authentication()
    return session


@pytest.fixture
def responder():
    from bot.commands import CommandResponder, default_command_table

    return CommandResponder(default_command_table())

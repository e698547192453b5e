"""Shared pytest fixtures and configuration for the tutorbook test suite.

Guidelines
----------
* Core tests must be pure — no filesystem, no console.
* Storage tests use ``tmp_path`` only.
* Interactive prompts (input, questionary) are always injected or mocked.
"""

from __future__ import annotations

from typing import Any

import pytest

from tutorbook.core.history import HistoryManager
from tutorbook.core.logic import LogicManager
from tutorbook.core.model_manager import ModelManager
from tutorbook.core.models import AddressBook, Email, Name, Person, Phone, Tag


def make_person(**overrides: Any) -> Person:
    """Factory with sensible defaults for concise tests."""
    defaults: dict[str, Any] = {
        "name": "Amy Bee",
        "phone": "85355255",
        "parent_phone": "91234567",
        "email": "amy@gmail.com",
        "tags": (),
        "note": "",
    }
    defaults.update(overrides)
    return Person(
        name=Name(defaults["name"]),
        phone=Phone(defaults["phone"]),
        parent_phone=Phone(defaults["parent_phone"]),
        email=Email(defaults["email"]),
        tags=frozenset(Tag(tag) for tag in defaults["tags"]),
        note=defaults["note"],
    )


@pytest.fixture
def model() -> ModelManager:
    return ModelManager(AddressBook(), HistoryManager())


@pytest.fixture
def logic(model: ModelManager) -> LogicManager:
    return LogicManager(model)

from __future__ import annotations

import uuid


def new_id() -> str:
    return str(uuid.uuid4())


class Identified:
    """Mixin giving an object a random string id that can be regenerated on reset."""

    def __init__(self) -> None:
        self._id = new_id()

    @property
    def id(self) -> str:
        return self._id

    def regenerate_id(self) -> None:
        self._id = new_id()

from __future__ import annotations

from typing import Optional, Protocol

from .model import Identity


class IdentityRepository(Protocol):
    def get(self, uid: str) -> Optional[Identity]:
        raise NotImplementedError

    def create(self, uid: str) -> Identity:
        raise NotImplementedError

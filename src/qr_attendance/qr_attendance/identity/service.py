from __future__ import annotations

import logging
import uuid
from typing import Callable, Optional

from itsdangerous import BadSignature, URLSafeSerializer

from ..core.exceptions import DomainError, IdentityFailure
from .model import Identity, Tenant
from .repository import IdentityRepository

logger = logging.getLogger(__name__)

_TOKEN_SALT = "qr-attendance-identity"


def _new_uid() -> str:
    return uuid.uuid4().hex


class IdentityBootstrap:
    """Use case: establish the anonymous identity that owns a browser session.

    Order of preference:
    1. resume the uid already stored in the session, if it still exists;
    2. exchange a signed credential token for its identity;
    3. create a fresh anonymous identity.

    Any failure surfaces as ``IdentityFailure`` (fail closed).
    """

    def __init__(
        self,
        identities: IdentityRepository,
        *,
        installation_id: str,
        secret_key: str,
        uid_factory: Callable[[], str] = _new_uid,
    ):
        self._identities = identities
        self._installation_id = installation_id
        self._serializer = URLSafeSerializer(secret_key, salt=_TOKEN_SALT)
        self._uid_factory = uid_factory

    def establish(self, *, session_uid: Optional[str] = None, token: Optional[str] = None) -> Identity:
        try:
            if session_uid:
                existing = self._identities.get(session_uid)
                if existing:
                    return existing

            if token:
                uid = self._uid_from_token(token)
                identity = self._identities.get(uid) or self._identities.create(uid)
                logger.info("Identidad %s restablecida desde token", uid)
                return identity

            identity = self._identities.create(self._uid_factory())
            logger.info("Identidad anónima creada: %s", identity.uid)
            return identity
        except IdentityFailure:
            raise
        except DomainError as e:
            logger.error("Fallo al establecer la identidad: %s", e)
            raise IdentityFailure("No se pudo iniciar la sesión") from e

    def issue_token(self, identity: Identity) -> str:
        return self._serializer.dumps({"uid": identity.uid})

    def tenant_for(self, identity: Identity) -> Tenant:
        return Tenant(installation_id=self._installation_id, uid=identity.uid)

    def _uid_from_token(self, token: str) -> str:
        try:
            data = self._serializer.loads(token)
        except BadSignature:
            raise IdentityFailure("Token de sesión inválido") from None

        uid = data.get("uid") if isinstance(data, dict) else None
        if not isinstance(uid, str) or not uid.strip():
            raise IdentityFailure("Token de sesión inválido")
        return uid.strip()

from itsdangerous import BadData, URLSafeSerializer

from carhire.exceptions import TokenMismatchError

HANDOVER_SALT = "handover-token"


class HandoverTokenCodec:
    """Signs and opens handover tokens with the configured HANDOVER_SECRET."""

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("handover secret must not be empty")
        self._serializer = URLSafeSerializer(secret, salt=HANDOVER_SALT)

    def dumps(self, payload: dict) -> str:
        return self._serializer.dumps(payload)

    def loads(self, token: str) -> dict:
        if not token or not isinstance(token, str):
            raise TokenMismatchError("Error: handover token missing")
        try:
            payload = self._serializer.loads(token)
        except BadData:
            raise TokenMismatchError("Error: handover token is not valid") from None
        if not isinstance(payload, dict) or not isinstance(payload.get("rid"), int):
            raise TokenMismatchError("Error: handover token is malformed")
        return payload

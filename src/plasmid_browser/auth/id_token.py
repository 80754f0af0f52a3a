"""Read the identity label out of an identity-provider ID token."""

import base64
import binascii
import json


def decode_payload(token: str) -> dict:
    """
    Decode the payload segment of a JWT without verifying it.

    Verification is the data endpoint's job; the client only needs the
    claims for display.

    Raises:
        ValueError: If the token is not a three-part JWT with a JSON object payload
    """
    parts = (token or "").split(".")
    if len(parts) != 3:
        raise ValueError("Token is not a JWT")
    segment = parts[1]
    segment += "=" * (-len(segment) % 4)
    try:
        raw = base64.urlsafe_b64decode(segment.encode("ascii"))
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, json.JSONDecodeError) as e:
        raise ValueError(f"Token payload is not decodable: {e}") from e
    if not isinstance(payload, dict):
        raise ValueError("Token payload is not a JSON object")
    return payload


def identity_from_token(token: str) -> str:
    """Email claim of the token, or '' when it cannot be read."""
    try:
        payload = decode_payload(token)
    except ValueError:
        return ""
    email = payload.get("email")
    return email if isinstance(email, str) else ""

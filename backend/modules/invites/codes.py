"""
Invite code generation.

Codes are 8 symbols from an alphabet without the look-alikes 0/O and 1/I,
drawn from the ``secrets`` CSPRNG.
"""

import secrets

INVITE_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
INVITE_CODE_LENGTH = 8
MAX_CODE_ATTEMPTS = 10


def generate_invite_code(length: int = INVITE_CODE_LENGTH) -> str:
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))

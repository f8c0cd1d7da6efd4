import bcrypt

from backend.core import config

# bcrypt only looks at the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    password_bytes = password.encode('utf-8')[:BCRYPT_MAX_BYTES]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


def verify_password(password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    password_bytes = password.encode('utf-8')[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))
    except ValueError:
        # Malformed stored hash
        return False

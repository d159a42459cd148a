import random
import string

_ALPHABET = string.ascii_lowercase + string.digits
ID_LENGTH = 9


def new_id() -> str:
    # Session-scoped ids, no collision check.
    return "".join(random.choices(_ALPHABET, k=ID_LENGTH))

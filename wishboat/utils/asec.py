"""Security tools, including password hashing.

Passwords are hashed by argon2id. The operation and memory limits are the "interactive" ones of libsodium by default, which is what a login form can afford on every request.

Related:

- [nacl.pwhash - PyNaCL documentation](https://pynacl.readthedocs.io/en/latest/api/pwhash/)
- [Password hashing - libsodium documentation](https://doc.libsodium.org/password_hashing)
"""
from . import global_executor
from asyncio import Future, ensure_future, get_running_loop
from base64 import standard_b64decode, standard_b64encode

from nacl.exceptions import InvalidkeyError
from nacl.pwhash import argon2id

OPSLIMIT = argon2id.OPSLIMIT_INTERACTIVE
MEMLIMIT = argon2id.MEMLIMIT_INTERACTIVE


def password_hashing_sync(password: str) -> str:
    """Hash `password`, then encode the hash in base64. The result is an ASCII string.

    ..caution:: This function is synchrounous.
        It may unexecptly block the thread.
    """
    return standard_b64encode(
        argon2id.str(
            password.encode("utf-8"),
            opslimit=OPSLIMIT,
            memlimit=MEMLIMIT,
        )
    ).decode("ascii")


def password_check_sync(password: str, password_hash: str) -> bool:
    """Check if the `password_hash` matchs `password`.

    ..caution:: This function is synchrounous.
        It may unexecptly block the thread.
    """
    try:
        return argon2id.verify(
            standard_b64decode(password_hash.encode("ascii")),
            password.encode("utf-8"),
        )
    except InvalidkeyError:
        return False


def password_hashing(password: str) -> "Future[str]":
    """Hash `password` in another thread.

    ..note:: A thread pool executor wrapper for `password_hashing_sync`.
    """
    return ensure_future(
        get_running_loop().run_in_executor(
            global_executor.get(), password_hashing_sync, password
        )
    )


def password_check(password: str, password_hash: str) -> "Future[bool]":
    """Check if the `password_hash` matchs `password`, in another thread.

    ..note:: A thread pool executor wrapper for `password_check_sync`.
    """
    return ensure_future(
        get_running_loop().run_in_executor(
            global_executor.get(), password_check_sync, password, password_hash
        )
    )

"""일회용 로그인 코드 생성/해싱 유틸리티 모듈.

One-time login code generation and hashing utility module.
Uses bcrypt directly; codes are never stored in plain text.
"""

import secrets

import bcrypt


def generate_code(length: int) -> str:
    """숫자로 된 일회용 코드를 생성합니다.

    Generate a numeric one-time code of the given length using a CSPRNG.

    Args:
        length: 코드 자릿수 (Number of digits)

    Returns:
        str: 0으로 시작할 수 있는 숫자 문자열 (Digit string, may start with 0)
    """
    return "".join(secrets.choice("0123456789") for _ in range(length))


def hash_code(code: str) -> str:
    """평문 코드를 bcrypt 해시로 변환합니다.

    Hash a plain one-time code using bcrypt.

    Args:
        code: 평문 코드 (Plain code to hash)

    Returns:
        str: bcrypt 해시 문자열 (Bcrypt hash string, ~60 chars)
    """
    return bcrypt.hashpw(code.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_code(plain_code: str, hashed_code: str) -> bool:
    """평문 코드와 bcrypt 해시를 비교 검증합니다.

    Verify a plain one-time code against a stored bcrypt hash.

    Args:
        plain_code: 검증할 평문 코드 (Plain code to verify)
        hashed_code: 저장된 bcrypt 해시 (Stored bcrypt hash)

    Returns:
        bool: 일치하면 True (True if the code matches the hash)
    """
    return bcrypt.checkpw(plain_code.encode("utf-8"), hashed_code.encode("utf-8"))

"""
StrKey 유틸리티

ed25519 공개키(32바이트) ↔ 계정 주소(G...) 변환.
인코딩/체크섬은 stellar_sdk.StrKey에 위임.
"""

from stellar_sdk import StrKey

ED25519_KEY_LENGTH: int = 32


def encode_account_id(public_key: bytes) -> str:
    """공개키 → 계정 주소

    Args:
        public_key: ed25519 공개키 32바이트

    Returns:
        G로 시작하는 56자 주소

    Raises:
        ValueError: 키 길이가 32바이트가 아닌 경우
    """
    if len(public_key) != ED25519_KEY_LENGTH:
        raise ValueError(f"ed25519 공개키는 32바이트여야 합니다: {len(public_key)}")
    return StrKey.encode_ed25519_public_key(public_key)


def decode_account_id(address: str) -> bytes:
    """계정 주소 → 공개키

    Raises:
        ValueError: base32 형식, 버전 바이트, 체크섬 중 하나라도 잘못된 경우
    """
    if not is_valid_account_id(address):
        raise ValueError(f"잘못된 계정 주소입니다: {address!r}")
    return StrKey.decode_ed25519_public_key(address)


def is_valid_account_id(address: str) -> bool:
    """계정 주소 유효성 검사"""
    if not isinstance(address, str) or not address:
        return False
    return StrKey.is_valid_ed25519_public_key(address)

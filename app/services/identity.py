"""Stable identifiers for cafes and users."""

import uuid

# 카페 ID 생성용 고정 네임스페이스 (절대 변경 금지: 기존 카페 ID가 모두 바뀜)
CAFE_NAMESPACE = uuid.UUID("6f1c1f7e-3a51-5b8e-9d2a-6a4b3c2d1e0f")
USER_NAMESPACE = uuid.UUID("0b7e4c2a-9f3d-5e61-8c4b-2d1a6f5e3b70")


def _normalize(text: str) -> str:
    return " ".join(str(text).split())


def cafe_key(name: str, address: str) -> tuple[str, str]:
    """Identity key used to match the same cafe across sources."""
    return _normalize(name), _normalize(address)


def derive_cafe_id(name: str, address: str) -> str:
    """Derive the cafe id from (name, address); same input, same id."""
    norm_name, norm_address = cafe_key(name, address)
    return str(uuid.uuid5(CAFE_NAMESPACE, f"{norm_name}|{norm_address}"))


def normalize_user_id(raw_id: str) -> str:
    """Return a UUID string for a provider user id.

    Supabase subjects are already UUIDs and are kept as-is; anything else
    (e.g. a numeric Kakao id) is mapped deterministically.
    """
    try:
        return str(uuid.UUID(str(raw_id)))
    except ValueError:
        return str(uuid.uuid5(USER_NAMESPACE, str(raw_id)))

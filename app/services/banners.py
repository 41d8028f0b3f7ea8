"""Ad banner slots.

One provider is active at a time, chosen by ``AD_BANNER_PROVIDER``. Providers
only describe the slot; the front-end renders it.
"""

from __future__ import annotations

from typing import Protocol

from app.core.config import Settings, settings as default_settings
from app.schemas.banner import BannerSlot


class BannerProvider(Protocol):
    name: str

    def render_slot(self, slot: str) -> BannerSlot:
        ...


class PromoBannerProvider:
    """Static in-house promotion for cafe owners."""

    name = "promo"

    def render_slot(self, slot: str) -> BannerSlot:
        return BannerSlot(
            slot=slot,
            provider=self.name,
            title="카페 사장님들을 위한 특별한 혜택!",
            body="우리 카페도 리스트에 등록하고 더 많은 고객을 만나보세요",
            cta_text="지금 등록하기",
        )


class AdSenseBannerProvider:
    name = "adsense"

    def __init__(self, client_id: str | None, slot_id: str | None) -> None:
        self.client_id = client_id
        self.slot_id = slot_id

    def render_slot(self, slot: str) -> BannerSlot:
        return BannerSlot(
            slot=slot,
            provider=self.name,
            embed={
                "data-ad-client": self.client_id,
                "data-ad-slot": self.slot_id,
                "data-ad-format": "auto",
                "data-full-width-responsive": "true",
            },
        )


class KakaoAdFitBannerProvider:
    name = "adfit"

    def __init__(self, unit_id: str | None) -> None:
        self.unit_id = unit_id

    def render_slot(self, slot: str) -> BannerSlot:
        return BannerSlot(
            slot=slot,
            provider=self.name,
            embed={"data-ad-unit": self.unit_id, "data-ad-width": "320", "data-ad-height": "100"},
        )


def build_banner_provider(config: Settings) -> BannerProvider:
    """Return the configured provider; unknown or unconfigured ones fall back to promo."""
    name = config.ad_banner_provider.lower()
    if name == "adsense" and config.adsense_client_id and config.adsense_slot_id:
        return AdSenseBannerProvider(config.adsense_client_id, config.adsense_slot_id)
    if name == "adfit" and config.kakao_adfit_unit_id:
        return KakaoAdFitBannerProvider(config.kakao_adfit_unit_id)
    return PromoBannerProvider()


def get_banner_provider() -> BannerProvider:
    return build_banner_provider(default_settings)

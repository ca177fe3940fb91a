"""
/**
 * @file jimeng_backend/services/region_service.py
 * @description 站点路由：地区描述 -> 站点 key、助手 ID、站点元信息与 benefitCount 规则。
 */
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


SITE_CHINA = "china"
SITE_US = "US"
SITE_HK = "HK"
SITE_JP = "JP"
SITE_SG = "SG"

SITES: Tuple[str, ...] = (SITE_CHINA, SITE_US, SITE_HK, SITE_JP, SITE_SG)

DEFAULT_ASSISTANT_ID_CN = 513695
DEFAULT_ASSISTANT_ID_INTL = 513641

BENEFIT_COUNT = 4
# US 站仅这两个老模型带 benefitCount
US_BENEFIT_MODELS = ("jimeng-4.0", "jimeng-3.0")
# HK/JP/SG 站除此模型外均带 benefitCount
INTL_NO_BENEFIT_MODEL = "nanobanana"


@dataclass(frozen=True)
class RegionDescriptor:
    is_cn: bool = False
    is_us: bool = False
    is_hk: bool = False
    is_jp: bool = False
    is_sg: bool = False

    def __post_init__(self):
        flags = [self.is_cn, self.is_us, self.is_hk, self.is_jp, self.is_sg]
        if sum(1 for f in flags if f) != 1:
            raise ValueError("RegionDescriptor needs exactly one region flag set")

    @property
    def is_international(self) -> bool:
        return not self.is_cn


CN_REGION = RegionDescriptor(is_cn=True)
US_REGION = RegionDescriptor(is_us=True)
HK_REGION = RegionDescriptor(is_hk=True)
JP_REGION = RegionDescriptor(is_jp=True)
SG_REGION = RegionDescriptor(is_sg=True)

SITE_REGIONS: Dict[str, RegionDescriptor] = {
    SITE_CHINA: CN_REGION,
    SITE_US: US_REGION,
    SITE_HK: HK_REGION,
    SITE_JP: JP_REGION,
    SITE_SG: SG_REGION,
}


@dataclass(frozen=True)
class SiteInfo:
    site: str
    code: str
    name: str
    description: str
    home_url: str
    appid: str
    lan: str
    loc: str


_INTL_HOME = "https://dreamina.capcut.com/"

SITE_INFO: Dict[str, SiteInfo] = {
    SITE_CHINA: SiteInfo(SITE_CHINA, "china", "即梦AI（国内站）", "即梦AI中国站，需要国内网络访问",
                         "https://jimeng.jianying.com/ai-tool/home", "513695", "zh-Hans", "cn"),
    SITE_US: SiteInfo(SITE_US, "us", "Dreamina（美国站）", "Dreamina 国际站（美国），需要国际网络访问",
                      _INTL_HOME, "513641", "en", "US"),
    SITE_HK: SiteInfo(SITE_HK, "hk", "Dreamina（香港站）", "Dreamina 国际站（香港），需要国际网络访问",
                      _INTL_HOME, "513641", "en", "HK"),
    SITE_JP: SiteInfo(SITE_JP, "jp", "Dreamina（日本站）", "Dreamina 国际站（日本），需要国际网络访问",
                      _INTL_HOME, "513641", "en", "JP"),
    SITE_SG: SiteInfo(SITE_SG, "sg", "Dreamina（新加坡站）", "Dreamina 国际站（新加坡），需要国际网络访问",
                      _INTL_HOME, "513641", "en", "SG"),
}

_SITE_LABELS = {
    SITE_CHINA: "China site",
    SITE_US: "US site",
    SITE_HK: "HK site",
    SITE_JP: "JP site",
    SITE_SG: "SG site",
}


def site_from_region(region: RegionDescriptor) -> str:
    if region.is_cn:
        return SITE_CHINA
    if region.is_us:
        return SITE_US
    if region.is_hk:
        return SITE_HK
    if region.is_jp:
        return SITE_JP
    if region.is_sg:
        return SITE_SG
    return SITE_US


def region_from_code(code: Optional[str]) -> RegionDescriptor:
    """
    Accepts the codes clients send ("cn", "china", "us", "HK", ...).
    Empty input means the home region.
    """
    value = (code or "").strip().lower()
    if value in ("", "cn", "china"):
        return CN_REGION
    for site, region in SITE_REGIONS.items():
        if value == site.lower():
            return region
    raise ValueError(f"Unknown region: {code}")


def site_label(region: RegionDescriptor) -> str:
    return _SITE_LABELS[site_from_region(region)]


def get_assistant_id(region: RegionDescriptor) -> int:
    return DEFAULT_ASSISTANT_ID_CN if region.is_cn else DEFAULT_ASSISTANT_ID_INTL


def get_benefit_count(user_model: str, region: RegionDescriptor, is_multi_image: bool = False) -> Optional[int]:
    """
    benefitCount 规则
    - 多图模式: 所有站点都不加
    - CN: 全部不加
    - US: 仅 jimeng-4.0 / jimeng-3.0 加
    - HK/JP/SG: nanobanana 不加，其余(含 nanobananapro)加
    """
    if is_multi_image:
        return None
    site = site_from_region(region)
    if site == SITE_CHINA:
        return None
    if site == SITE_US:
        return BENEFIT_COUNT if user_model in US_BENEFIT_MODELS else None
    if site in (SITE_HK, SITE_JP, SITE_SG):
        if user_model == INTL_NO_BENEFIT_MODEL:
            return None
        return BENEFIT_COUNT
    return None


def list_sites() -> List[str]:
    return list(SITES)

# src/scrappey_actor/models.py
"""
Records that flow through one scrape job.

- `ScrapeInput`: the job description, read once and never mutated.
- `ProviderResponse` / `Solution`: typed dicts describing what Scrappey sends back.
  At runtime they are plain dicts straight out of `response.json()`.
- `OutputRecord`: the flat, fixed-shape row pushed to the dataset.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Literal, Optional, TypedDict, Union

ScrappeyCommand = Literal[
    "request.get",
    "request.post",
    "request.put",
    "request.delete",
    "request.patch",
]


class BrowserAction(TypedDict, total=False):
    # Only `type` is always expected; everything else depends on the action.
    type: str
    cssSelector: str
    text: str
    url: str
    wait: int
    waitForSelector: str
    code: str
    timeout: int
    when: Literal["beforeload", "afterload"]
    ignoreErrors: bool


class Cookie(TypedDict, total=False):
    name: str
    value: str
    domain: str
    path: str
    expires: float
    httpOnly: bool
    secure: bool
    sameSite: Literal["Strict", "Lax", "None"]


class IpInfo(TypedDict, total=False):
    status: str
    country: str
    countryCode: str
    region: str
    regionName: str
    city: str
    zip: str
    lat: float
    lon: float
    timezone: str
    isp: str
    org: str
    query: str


class AntibotDetection(TypedDict, total=False):
    providers: List[str]
    confidence: Dict[str, float]
    primaryProvider: str


class Solution(TypedDict, total=False):
    """
    The `solution` sub-record of a successful Scrappey response.
    Every key is optional; the normalizer fills in defaults.
    """

    verified: bool
    type: str
    response: str  # page HTML
    statusCode: int
    currentUrl: str
    userAgent: str
    cookies: List[Cookie]
    cookieString: str
    responseHeaders: Dict[str, str]
    requestHeaders: Dict[str, str]
    method: str
    ipInfo: IpInfo
    innerText: str
    localStorageData: Dict[str, Any]
    screenshot: str
    screenshotUrl: str
    videoUrl: str
    javascriptReturn: List[Any]
    detectedAntibotProviders: AntibotDetection


class ProviderResponse(TypedDict, total=False):
    # "success" or "error"; this is the discriminator the actor checks
    data: str
    solution: Solution
    session: str
    timeElapsed: float
    error: str  # e.g. "CODE-0002"
    info: str   # link with more details about the error


@dataclass(frozen=True)
class ScrapeInput:
    """
    One scrape job, as supplied by the host.

    Attribute names are snake_case; `from_mapping` reads the camelCase keys the
    actor input uses (which are also the keys Scrappey expects in the body).
    """

    # Required
    api_key: str
    url: str

    # Command
    cmd: Optional[str] = None
    post_data: Optional[Union[Dict[str, Any], str]] = None

    # Request
    request_type: Optional[str] = None
    custom_headers: Optional[Dict[str, str]] = None
    referer: Optional[str] = None

    # Proxy
    proxy: Optional[str] = None
    proxy_country: Optional[str] = None
    no_proxy: bool = False
    premium_proxy: bool = False
    mobile_proxy: bool = False

    # Session
    session: Optional[str] = None
    close_after_use: bool = False

    # Browser
    browser_actions: Optional[List[BrowserAction]] = None
    user_agent: Optional[str] = None
    locales: Optional[List[str]] = None

    # Antibot bypass
    cloudflare_bypass: bool = False
    datadome_bypass: bool = False
    kasada_bypass: bool = False
    disable_anti_bot: bool = False

    # Captcha
    automatically_solve_captchas: bool = False
    always_load: Optional[List[str]] = None

    # Response shaping
    screenshot: bool = False
    screenshot_upload: bool = False
    video: bool = False
    css_selector: Optional[str] = None
    inner_text: bool = False
    include_images: bool = False
    include_links: bool = False
    regex: Optional[Union[str, List[str]]] = None
    filter: Optional[List[str]] = None

    # Cookies / storage
    cookies: Optional[str] = None
    cookiejar: Optional[List[Cookie]] = None
    local_storage: Optional[Dict[str, Any]] = None

    # Advanced
    intercept_fetch_request: Optional[Union[str, List[str]]] = None
    abort_on_detection: Optional[List[str]] = None
    whitelisted_domains: Optional[List[str]] = None
    black_listed_domains: Optional[List[str]] = None
    full_page_load: bool = False
    timeout: Optional[float] = None  # milliseconds
    retries: Optional[int] = None

    # Raw keys we did not recognize (kept so callers can warn about typos)
    unknown_keys: List[str] = field(default_factory=list, compare=False)

    @classmethod
    def from_mapping(cls, raw: Dict[str, Any]) -> "ScrapeInput":
        """
        Build from the camelCase actor input. Missing keys take the dataclass
        defaults; `None` values are treated the same as missing ones.
        Required keys are NOT checked here, see `pipeline.validate`.
        """
        known = {INPUT_KEYS[f.name]: f.name for f in fields(cls) if f.name in INPUT_KEYS}
        kwargs: Dict[str, Any] = {"api_key": "", "url": ""}
        unknown: List[str] = []
        for key, value in raw.items():
            attr = known.get(key)
            if attr is None:
                unknown.append(key)
                continue
            if value is None:
                continue
            kwargs[attr] = value
        return cls(unknown_keys=sorted(unknown), **kwargs)


# attribute name -> camelCase input key
INPUT_KEYS: Dict[str, str] = {
    "api_key": "scrappeyApiKey",
    "url": "url",
    "cmd": "cmd",
    "post_data": "postData",
    "request_type": "requestType",
    "custom_headers": "customHeaders",
    "referer": "referer",
    "proxy": "proxy",
    "proxy_country": "proxyCountry",
    "no_proxy": "noProxy",
    "premium_proxy": "premiumProxy",
    "mobile_proxy": "mobileProxy",
    "session": "session",
    "close_after_use": "closeAfterUse",
    "browser_actions": "browserActions",
    "user_agent": "userAgent",
    "locales": "locales",
    "cloudflare_bypass": "cloudflareBypass",
    "datadome_bypass": "datadomeBypass",
    "kasada_bypass": "kasadaBypass",
    "disable_anti_bot": "disableAntiBot",
    "automatically_solve_captchas": "automaticallySolveCaptchas",
    "always_load": "alwaysLoad",
    "screenshot": "screenshot",
    "screenshot_upload": "screenshotUpload",
    "video": "video",
    "css_selector": "cssSelector",
    "inner_text": "innerText",
    "include_images": "includeImages",
    "include_links": "includeLinks",
    "regex": "regex",
    "filter": "filter",
    "cookies": "cookies",
    "cookiejar": "cookiejar",
    "local_storage": "localStorage",
    "intercept_fetch_request": "interceptFetchRequest",
    "abort_on_detection": "abortOnDetection",
    "whitelisted_domains": "whitelistedDomains",
    "black_listed_domains": "blackListedDomains",
    "full_page_load": "fullPageLoad",
    "timeout": "timeout",
    "retries": "retries",
}


@dataclass(frozen=True)
class OutputRecord:
    """Flat row pushed to the dataset, one per successful job."""

    url: str
    cmd: str
    verified: bool
    statusCode: Optional[int]
    currentUrl: Optional[str]
    userAgent: Optional[str]
    cookies: List[Cookie]
    cookieString: Optional[str]
    responseHeaders: Optional[Dict[str, str]]
    requestHeaders: Optional[Dict[str, str]]
    html: Optional[str]
    innerText: Optional[str]
    ipInfo: Optional[IpInfo]
    session: Optional[str]
    timeElapsed: Optional[float]
    screenshot: Optional[str]
    screenshotUrl: Optional[str]
    videoUrl: Optional[str]
    javascriptReturn: Optional[List[Any]]
    detectedAntibotProviders: Optional[AntibotDetection]
    localStorage: Optional[Dict[str, Any]]
    timestamp: str

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

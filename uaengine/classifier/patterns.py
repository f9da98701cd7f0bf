"""UA token patterns database.

Token regexes used by the detection cascades, the Windows NT lookup table
and the three independent flag lists (bot / webview / headless).

Flag lists are ``(label, pattern)`` pairs so callers can report *which*
signature fired; membership in one list says nothing about the others.
"""

import re
from typing import Dict, List, Tuple

# ============================================================================
# BROWSER TOKENS
# ============================================================================

EDGE_ANY = re.compile(r'Edg/|EdgA/|EdgDev/|EdgiOS/')
EDGE_VERSIONS: List[Tuple[re.Pattern, str]] = [
    # (version pattern, channel); order matters, the desktop token is the fallback
    (re.compile(r'EdgA/([\d.]+)'), 'beta'),
    (re.compile(r'EdgDev/([\d.]+)'), 'dev'),
    (re.compile(r'EdgiOS/([\d.]+)'), 'stable'),
    (re.compile(r'Edg/([\d.]+)'), 'stable'),
]

SAMSUNG = re.compile(r'SamsungBrowser/([\d.]+)?')
OPERA_ANY = re.compile(r'OPR/|Opera/')
OPERA_VERSION = re.compile(r'OPR/([\d.]+)')
OPERA_LEGACY_VERSION = re.compile(r'Version/([\d.]+)')
OPERA_PRESTO_VERSION = re.compile(r'Opera/([\d.]+)')

CHROME_ANY = re.compile(r'Chrome/|CriOS/')
# tokens that also carry Chrome/ but belong to an earlier rule
CHROME_EXCLUDE = re.compile(r'Edg/|EdgA/|EdgDev/|OPR/|SamsungBrowser/')
CHROME_VERSION = re.compile(r'(?:Chrome|CriOS)/([\d.]+)')
CHROME_CHANNELS: List[Tuple[str, re.Pattern]] = [
    ('beta', re.compile(r'Chrome/.*?beta', re.I)),
    ('dev', re.compile(r'Chrome/.*?dev', re.I)),
    ('canary', re.compile(r'Chrome/.*?canary', re.I)),
]

FIREFOX_ANY = re.compile(r'Firefox/|FxiOS/')
FIREFOX_VERSION = re.compile(r'(?:Firefox|FxiOS)/([\d.]+)')
FIREFOX_CHANNELS: List[Tuple[str, re.Pattern]] = [
    ('beta', re.compile(r'Firefox/.*?beta', re.I)),
    ('nightly', re.compile(r'Firefox/.*?nightly', re.I)),
    ('esr', re.compile(r'Firefox/.*?esr', re.I)),
]

SAFARI_ANY = re.compile(r'Safari/')
SAFARI_EXCLUDE = re.compile(r'Chrome/')
SAFARI_VERSION = re.compile(r'Version/([\d.]+).*?Safari')

IE_ANY = re.compile(r'MSIE|Trident/')
IE_VERSION = re.compile(r'MSIE ([\d.]+)')
IE_RV_VERSION = re.compile(r'rv:([\d.]+)')

QQ = re.compile(r'QQBrowser/([\d.]+)')
UC = re.compile(r'UCBrowser/([\d.]+)')
BROWSER_360 = re.compile(r'360SE|360EE')
SOGOU = re.compile(r'SE\s([\d.X]+)|SogouMobileBrowser/([\d.]+)')

# ============================================================================
# ENGINE TOKENS
# ============================================================================

BLINK_ANY = re.compile(r'Chrome/|Edg/|EdgA/|EdgDev/|OPR/')
BLINK_VERSION = re.compile(r'Chrome/([\d.]+)')
WEBKIT_VERSION = re.compile(r'WebKit/([\d.]+)')
GECKO_ANY = re.compile(r'Gecko/')
GECKO_VERSION = re.compile(r'rv:([\d.]+)')
TRIDENT_VERSION = re.compile(r'Trident/([\d.]+)')
PRESTO_VERSION = re.compile(r'Presto/([\d.]+)')

# ============================================================================
# OS TOKENS
# ============================================================================

IOS_ANY = re.compile(r'iPhone|iPad|iPod')
IOS_VERSION = re.compile(r'OS ([\d_]+)')
HARMONY_VERSION = re.compile(r'HarmonyOS ([\d.]+)')
ANDROID_VERSION = re.compile(r'Android ([\d.]+)')
WINDOWS_NT_VERSION = re.compile(r'Windows NT ([\d.]+)')
# Windows 11 still reports NT 10.0; only a >= 22000 build number tells them apart
WINDOWS_NT_10 = re.compile(r'Windows NT 10\.0')
WINDOWS_BUILD = re.compile(r'(?<!\d)(\d{5})(?!\d)')
WINDOWS_11_MIN_BUILD = 22000
MAC_ANY = re.compile(r'Mac OS X|macOS')
MAC_VERSION = re.compile(r'Mac OS X ([\d_.]+)')
UBUNTU_VERSION = re.compile(r'Ubuntu/([\d.]+)')
CHROMEOS_VERSION = re.compile(r'CrOS [\w]+ ([\d.]+)')
FREEBSD_VERSION = re.compile(r'FreeBSD ([\d.]+)')

WINDOWS_NT_NAMES: Dict[str, str] = {
    '10.0': '10',
    '6.3': '8.1',
    '6.2': '8',
    '6.1': '7',
    '6.0': 'Vista',
    '5.2': 'XP',
    '5.1': 'XP',
    '5.0': '2000',
}

# ============================================================================
# DEVICE TOKENS
# ============================================================================

TV_ANY = re.compile(r'TV|SmartTV|SMART-TV|GoogleTV|AppleTV|Roku|WebOS|Tizen.*TV')
WEARABLE_ANY = re.compile(r'Watch|wearable|WearOS', re.I)
TABLET_IPAD = re.compile(r'iPad')
MOBILE_ANY = re.compile(r'Mobile|iPhone|iPod|Android.*Mobile|BlackBerry|IEMobile|Opera.*Mini')

# ============================================================================
# CPU TOKENS
# ============================================================================

CPU_PATTERNS: List[Tuple[str, re.Pattern]] = [
    ('amd64', re.compile(r'WOW64|Win64|x64|amd64|x86_64', re.I)),
    ('arm64', re.compile(r'arm64|aarch64', re.I)),
    ('arm', re.compile(r'\barm', re.I)),
    ('loongarch64', re.compile(r'loongarch64', re.I)),
    ('riscv64', re.compile(r'riscv64', re.I)),
    ('ia32', re.compile(r'i386|i686|x86', re.I)),
]

# ============================================================================
# FLAG SIGNATURES
# ============================================================================

BOT_PATTERNS: List[Tuple[str, re.Pattern]] = [
    # search engines
    ('Googlebot', re.compile(r'googlebot', re.I)),
    ('Bingbot', re.compile(r'bingbot', re.I)),
    ('Baiduspider', re.compile(r'baiduspider', re.I)),
    ('YandexBot', re.compile(r'yandexbot', re.I)),
    ('Sogou Spider', re.compile(r'sogou.*spider', re.I)),
    ('360Spider', re.compile(r'360spider', re.I)),
    ('DuckDuckBot', re.compile(r'duckduckbot', re.I)),
    ('MSNBot', re.compile(r'msnbot', re.I)),
    ('Yahoo Slurp', re.compile(r'yahoo.*slurp', re.I)),
    ('Applebot', re.compile(r'applebot', re.I)),
    # social previews
    ('Facebook', re.compile(r'facebookexternalhit', re.I)),
    ('Twitterbot', re.compile(r'twitterbot', re.I)),
    ('LinkedInBot', re.compile(r'linkedinbot', re.I)),
    ('WhatsApp', re.compile(r'whatsapp', re.I)),
    ('TelegramBot', re.compile(r'telegrambot', re.I)),
    ('Slackbot', re.compile(r'slackbot', re.I)),
    ('Discordbot', re.compile(r'discordbot', re.I)),
    ('SkypeBot', re.compile(r'skypebot', re.I)),
    # generic crawler words
    ('crawler', re.compile(r'crawler', re.I)),
    ('spider', re.compile(r'spider', re.I)),
    ('scraper', re.compile(r'scraper', re.I)),
    ('fetcher', re.compile(r'fetcher', re.I)),
    ('monitor', re.compile(r'monitor', re.I)),
    ('checker', re.compile(r'checker', re.I)),
    ('validator', re.compile(r'validator', re.I)),
    ('bot', re.compile(r'bot[\s/]|\sbot$|^bot', re.I)),
    # HTTP clients
    ('curl', re.compile(r'curl', re.I)),
    ('wget', re.compile(r'wget', re.I)),
    ('python-requests', re.compile(r'python-requests', re.I)),
    ('Java', re.compile(r'java/', re.I)),
    ('Go-http-client', re.compile(r'go-http-client', re.I)),
    ('okhttp', re.compile(r'okhttp', re.I)),
    ('axios', re.compile(r'axios', re.I)),
    ('node-fetch', re.compile(r'node-fetch', re.I)),
    # uptime monitoring
    ('Pingdom', re.compile(r'pingdom', re.I)),
    ('UptimeRobot', re.compile(r'uptimerobot', re.I)),
    ('StatusCake', re.compile(r'statuscake', re.I)),
    ('New Relic', re.compile(r'newrelic', re.I)),
    ('Datadog', re.compile(r'datadog', re.I)),
]

WEBVIEW_PATTERNS: List[Tuple[str, re.Pattern]] = [
    # messaging / super-apps
    ('WeChat', re.compile(r'MicroMessenger', re.I)),
    ('QQ', re.compile(r'QQ/', re.I)),
    ('Weibo', re.compile(r'Weibo', re.I)),
    ('DingTalk', re.compile(r'DingTalk', re.I)),
    ('Alipay', re.compile(r'AlipayClient', re.I)),
    ('Lark', re.compile(r'Lark', re.I)),
    ('ByteDance', re.compile(r'ByteDance', re.I)),
    ('TikTok', re.compile(r'TikTok', re.I)),
    ('Douyin', re.compile(r'Douyin', re.I)),
    ('Taobao', re.compile(r'Taobao', re.I)),
    ('Tmall', re.compile(r'Tmall', re.I)),
    ('JD', re.compile(r'JD', re.I)),
    ('Meituan', re.compile(r'Meituan', re.I)),
    ('Eleme', re.compile(r'Eleme', re.I)),
    # social apps
    ('Instagram', re.compile(r'Instagram', re.I)),
    ('Facebook', re.compile(r'Facebook', re.I)),
    ('Twitter', re.compile(r'Twitter', re.I)),
    ('LinkedIn', re.compile(r'LinkedIn', re.I)),
    ('Pinterest', re.compile(r'Pinterest', re.I)),
    ('Snapchat', re.compile(r'Snapchat', re.I)),
    ('WhatsApp', re.compile(r'WhatsApp', re.I)),
    ('Telegram', re.compile(r'Telegram', re.I)),
    ('Line', re.compile(r'Line', re.I)),
    # hybrid frameworks
    ('Electron', re.compile(r'Electron', re.I)),
    ('Tauri', re.compile(r'Tauri', re.I)),
    ('Cordova', re.compile(r'Cordova', re.I)),
    ('Capacitor', re.compile(r'Capacitor', re.I)),
    ('React Native', re.compile(r'ReactNative', re.I)),
    ('Flutter', re.compile(r'Flutter', re.I)),
    ('Xamarin', re.compile(r'Xamarin', re.I)),
    ('Ionic', re.compile(r'Ionic', re.I)),
    # generic markers
    ('wv', re.compile(r'wv\)|WebView', re.I)),
]

# Android System WebView: Version/x.y before a full (non-reduced) Chrome token
ANDROID_WEBVIEW = re.compile(r'Android.*Version/[\d.]+.*Chrome/[\d.]+.*Mobile.*Safari', re.I)
REDUCED_CHROME = re.compile(r'Chrome/[\d.]+\.0\.0\.0', re.I)

HEADLESS_PATTERNS: List[Tuple[str, re.Pattern]] = [
    ('HeadlessChrome', re.compile(r'HeadlessChrome', re.I)),
    ('PhantomJS', re.compile(r'PhantomJS', re.I)),
    ('Puppeteer', re.compile(r'Puppeteer', re.I)),
    ('Playwright', re.compile(r'Playwright', re.I)),
    ('Selenium', re.compile(r'Selenium', re.I)),
    ('Chrome --headless', re.compile(r'Chrome.*--headless', re.I)),
    ('Firefox Headless', re.compile(r'Firefox.*Headless', re.I)),
    ('SlimerJS', re.compile(r'SlimerJS', re.I)),
    ('HtmlUnit', re.compile(r'HtmlUnit', re.I)),
    ('Zombie', re.compile(r'Zombie', re.I)),
]

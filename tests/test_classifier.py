import unittest, pathlib, sys
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from uaengine.classifier import Classifier, Rule, parse_ua, token
from uaengine.classifier.parser import BROWSER_RULES, OS_RULES, parse_cpu
from uaengine.classifier.validator import normalize_version, split_version
from uaengine.types import BrowserInfo, DeviceType

CHROME_WINDOWS = ('Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
                  '(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36')
EDGE_ANDROID = ('Mozilla/5.0 (Linux; Android 10; K) AppleWebKit/537.36 (KHTML, like Gecko) '
                'Chrome/123.0.0.0 Mobile Safari/537.36 EdgA/123.0.2420.65')
EDGE_WINDOWS = ('Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) '
                'Chrome/120.0.0.0 Safari/537.36 Edg/120.0.2210.91')
FIREFOX_WINDOWS = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0'
SAFARI_MAC = ('Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 '
              '(KHTML, like Gecko) Version/17.2 Safari/605.1.15')
SAFARI_IPHONE = ('Mozilla/5.0 (iPhone; CPU iPhone OS 17_2 like Mac OS X) AppleWebKit/605.1.15 '
                 '(KHTML, like Gecko) Version/17.2 Mobile/15E148 Safari/604.1')
SAFARI_IPAD = ('Mozilla/5.0 (iPad; CPU OS 16_6 like Mac OS X) AppleWebKit/605.1.15 '
               '(KHTML, like Gecko) Version/16.6 Mobile/15E148 Safari/604.1')
OPERA = ('Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) '
         'Chrome/119.0.0.0 Safari/537.36 OPR/105.0.0.0')
OPERA_PRESTO = 'Opera/9.80 (Windows NT 6.1; U; en) Presto/2.12.388 Version/12.16'
SAMSUNG = ('Mozilla/5.0 (Linux; Android 13; SM-S918B) AppleWebKit/537.36 (KHTML, like Gecko) '
           'SamsungBrowser/23.0 Chrome/115.0.0.0 Mobile Safari/537.36')
IE11 = 'Mozilla/5.0 (Windows NT 10.0; WOW64; Trident/7.0; rv:11.0) like Gecko'
IE9 = 'Mozilla/5.0 (compatible; MSIE 9.0; Windows NT 6.1; Trident/5.0)'
CHROME_IOS = ('Mozilla/5.0 (iPhone; CPU iPhone OS 17_2 like Mac OS X) AppleWebKit/605.1.15 '
              '(KHTML, like Gecko) CriOS/120.0.6099.119 Mobile/15E148 Safari/604.1')


class TestBrowserCascade(unittest.TestCase):
    def test_chrome_windows_desktop(self):
        ua = parse_ua(CHROME_WINDOWS)
        self.assertEqual(ua.browser.name, 'Chrome')
        self.assertEqual(ua.browser.major, 124)
        self.assertEqual(ua.browser.version, '124.0.0.0')
        self.assertEqual(ua.browser.channel, 'stable')
        self.assertEqual(ua.engine.name, 'Blink')
        self.assertEqual(ua.os.name, 'Windows')
        self.assertEqual(ua.os.version, '10')
        self.assertEqual(ua.device.type, DeviceType.DESKTOP)
        self.assertEqual(ua.cpu.architecture, 'amd64')
        self.assertFalse(ua.is_bot or ua.is_webview or ua.is_headless)
        self.assertEqual(ua.source, CHROME_WINDOWS)

    def test_edge_android_is_beta_channel(self):
        ua = parse_ua(EDGE_ANDROID)
        self.assertEqual(ua.browser.name, 'Edge')
        self.assertEqual(ua.browser.channel, 'beta')
        self.assertEqual(ua.browser.version, '123.0.2420.65')
        self.assertEqual(ua.os.name, 'Android')
        self.assertEqual(ua.device.type, DeviceType.MOBILE)

    def test_edge_before_chrome(self):
        ua = parse_ua(EDGE_WINDOWS)
        self.assertEqual(ua.browser.name, 'Edge')
        self.assertEqual(ua.browser.channel, 'stable')
        self.assertEqual(ua.browser.major, 120)

    def test_firefox(self):
        ua = parse_ua(FIREFOX_WINDOWS)
        self.assertEqual(ua.browser.name, 'Firefox')
        self.assertEqual(ua.browser.major, 121)
        self.assertEqual(ua.browser.minor, 0)
        self.assertIsNone(ua.browser.patch)
        self.assertEqual(ua.engine.name, 'Gecko')
        self.assertEqual(ua.engine.version, '121.0')

    def test_safari_mac(self):
        ua = parse_ua(SAFARI_MAC)
        self.assertEqual(ua.browser.name, 'Safari')
        self.assertEqual((ua.browser.major, ua.browser.minor), (17, 2))
        self.assertEqual(ua.engine.name, 'WebKit')
        self.assertEqual(ua.os.name, 'macOS')
        self.assertEqual(ua.os.version, '10.15.7')

    def test_opera_and_presto(self):
        self.assertEqual(parse_ua(OPERA).browser.name, 'Opera')
        self.assertEqual(parse_ua(OPERA).browser.major, 105)
        legacy = parse_ua(OPERA_PRESTO)
        self.assertEqual(legacy.browser.name, 'Opera')
        self.assertEqual(legacy.browser.version, '12.16')
        self.assertEqual(legacy.engine.name, 'Presto')
        self.assertEqual(legacy.os.version, '7')

    def test_samsung_before_chrome(self):
        ua = parse_ua(SAMSUNG)
        self.assertEqual(ua.browser.name, 'Samsung')
        self.assertEqual(ua.browser.version, '23.0')
        self.assertEqual(ua.device.vendor, 'Samsung')
        self.assertEqual(ua.device.model, 'SM-S918B')

    def test_internet_explorer(self):
        ie11 = parse_ua(IE11)
        self.assertEqual(ie11.browser.name, 'IE')
        self.assertEqual(ie11.browser.major, 11)
        self.assertEqual(ie11.engine.name, 'Trident')
        self.assertEqual(parse_ua(IE9).browser.version, '9.0')

    def test_ios_shells(self):
        ua = parse_ua(CHROME_IOS)
        self.assertEqual(ua.browser.name, 'Chrome')
        self.assertEqual(ua.browser.major, 120)
        self.assertEqual(ua.os.name, 'iOS')


class TestOSAndDevice(unittest.TestCase):
    def test_windows_11_needs_build_number(self):
        win11 = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64; Build 22631) Chrome/120.0.0.0'
        win10 = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64; Build 19045) Chrome/120.0.0.0'
        self.assertEqual(parse_ua(win11).os.version, '11')
        self.assertEqual(parse_ua(win10).os.version, '10')

    def test_windows_nt_table(self):
        self.assertEqual(parse_ua('Mozilla/5.0 (Windows NT 6.1; Win64; x64)').os.version, '7')
        self.assertEqual(parse_ua('Mozilla/5.0 (Windows NT 5.1)').os.version, 'XP')
        self.assertEqual(parse_ua('Mozilla/5.0 (Windows NT 4.0)').os.version, '4.0')

    def test_macos_big_sur_renumbering(self):
        ua = parse_ua('Mozilla/5.0 (Macintosh; Intel Mac OS X 10_16) AppleWebKit/605.1.15')
        self.assertEqual(ua.os.version, '11.0')

    def test_ios_versions(self):
        self.assertEqual(parse_ua(SAFARI_IPHONE).os.version, '17.2')
        ipad = parse_ua(SAFARI_IPAD)
        self.assertEqual(ipad.os.name, 'iOS')
        self.assertEqual(ipad.device.type, DeviceType.TABLET)
        self.assertEqual(ipad.device.vendor, 'Apple')

    def test_linux_distributions(self):
        ubuntu = parse_ua('Mozilla/5.0 (X11; Ubuntu; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0')
        self.assertEqual(ubuntu.os.name, 'Ubuntu')
        self.assertEqual(parse_ua('Mozilla/5.0 (X11; Linux x86_64) Chrome/120.0.0.0').os.name, 'Linux')

    def test_chrome_os(self):
        ua = parse_ua('Mozilla/5.0 (X11; CrOS x86_64 14541.0.0) AppleWebKit/537.36 '
                      '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36')
        self.assertEqual(ua.os.name, 'Chrome OS')
        self.assertEqual(ua.os.version, '14541.0.0')

    def test_android_tablet_vs_mobile(self):
        tablet = parse_ua('Mozilla/5.0 (Linux; Android 13; SM-T870) AppleWebKit/537.36 '
                          '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36')
        self.assertEqual(tablet.device.type, DeviceType.TABLET)
        self.assertEqual(tablet.device.model, 'SM-T870')
        pixel = parse_ua('Mozilla/5.0 (Linux; Android 14; Pixel 8 Pro) AppleWebKit/537.36 '
                         '(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36')
        self.assertEqual(pixel.device.type, DeviceType.MOBILE)
        self.assertEqual(pixel.device.vendor, 'Google')
        self.assertEqual(pixel.device.model, 'Pixel 8 Pro')

    def test_tv_and_wearable_outrank_mobile(self):
        tv = parse_ua('Mozilla/5.0 (SMART-TV; Linux; Tizen 6.0) AppleWebKit/537.36 (KHTML, like Gecko) '
                      'SamsungBrowser/4.0 Chrome/76.0.3809.146 TV Safari/537.36')
        self.assertEqual(tv.device.type, DeviceType.TV)
        self.assertEqual(tv.device.model, 'Tizen TV')
        watch = parse_ua('Mozilla/5.0 (Apple Watch; CPU Watch OS 7_0 like Mac OS X) Mobile')
        self.assertEqual(watch.device.type, DeviceType.WEARABLE)
        self.assertEqual(watch.device.vendor, 'Apple')

    def test_cpu_architectures(self):
        self.assertEqual(parse_cpu('X11; Linux aarch64').architecture, 'arm64')
        self.assertEqual(parse_cpu('X11; Linux armv7l').architecture, 'arm')
        self.assertEqual(parse_cpu('X11; Linux i686').architecture, 'ia32')
        self.assertEqual(parse_cpu('X11; Linux loongarch64').architecture, 'loongarch64')
        self.assertEqual(parse_cpu('X11; Linux riscv64').architecture, 'riscv64')
        self.assertEqual(parse_cpu(SAFARI_MAC).architecture, 'unknown')


class TestFlags(unittest.TestCase):
    def test_bot(self):
        ua = parse_ua('Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)')
        self.assertTrue(ua.is_bot)
        self.assertEqual(ua.browser.name, 'Unknown')

    def test_headless(self):
        ua = parse_ua('Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) '
                      'HeadlessChrome/120.0.0.0 Safari/537.36')
        self.assertTrue(ua.is_headless)
        self.assertEqual(ua.browser.name, 'Chrome')

    def test_webview(self):
        wechat = parse_ua(SAFARI_IPHONE + ' MicroMessenger/8.0.42')
        self.assertTrue(wechat.is_webview)
        android_wv = parse_ua('Mozilla/5.0 (Linux; Android 13; SM-G991B; wv) AppleWebKit/537.36 '
                              '(KHTML, like Gecko) Version/4.0 Chrome/120.0.6099.144 Mobile Safari/537.36')
        self.assertTrue(android_wv.is_webview)
        self.assertFalse(parse_ua(CHROME_WINDOWS).is_webview)

    def test_flags_are_independent(self):
        ua = parse_ua('facebookexternalhit/1.1 (+http://www.facebook.com/externalhit_uatext.php)')
        self.assertTrue(ua.is_bot)
        self.assertTrue(ua.is_webview)


class TestUnknownInput:
    def test_empty_string(self):
        ua = parse_ua('')
        assert ua.browser.name == 'Unknown'
        assert ua.browser.major is None
        assert ua.browser.minor is None
        assert ua.browser.patch is None
        assert ua.device.type == DeviceType.DESKTOP
        assert not (ua.is_bot or ua.is_webview or ua.is_headless)
        assert ua.source == ''

    def test_whitespace_keeps_source(self):
        assert parse_ua('   ').source == '   '

    def test_non_string(self):
        assert parse_ua(None).browser.name == 'Unknown'
        assert parse_ua(42).source == ''

    def test_garbage(self):
        ua = parse_ua('definitely not a user agent')
        assert ua.browser.name == 'Unknown'
        assert ua.os.name == 'Unknown'


class TestRuleSets:
    def test_browser_precedence_is_data(self):
        names = BROWSER_RULES.names()
        assert names.index('Edge') < names.index('Chrome')
        assert names.index('Samsung') < names.index('Chrome')
        assert names.index('Opera') < names.index('Chrome')
        assert names.index('Chrome') < names.index('Safari')
        assert OS_RULES.names()[:4] == ['iOS', 'HarmonyOS', 'Android', 'Windows']

    def test_insert_vendor_rule_is_local(self):
        classifier = Classifier()
        vivaldi = Rule('Vivaldi', token(r'Vivaldi/'), lambda ua: BrowserInfo('Vivaldi', '6.5', 6, 5))
        classifier.browser_rules.insert(vivaldi, before='Chrome')
        raw = CHROME_WINDOWS + ' Vivaldi/6.5.3206.48'
        assert classifier.classify(raw).browser.name == 'Vivaldi'
        assert parse_ua(raw).browser.name == 'Chrome'

    def test_failing_extractor_degrades_to_unknown(self):
        classifier = Classifier()

        def boom(ua):
            raise RuntimeError('bad rule')

        classifier.browser_rules.insert(Rule('Broken', token(r'Chrome/'), boom), before='Edge')
        result = classifier.classify(CHROME_WINDOWS)
        assert result.browser.name == 'Unknown'
        assert result.source == CHROME_WINDOWS


class TestVersionNormalization:
    def test_normalize(self):
        assert normalize_version('124.0.6367.60 (Official Build)') == '124.0.6367.60'
        assert normalize_version('..17..0.') == '17.0'
        assert normalize_version('') == ''

    def test_split_keeps_absent_components(self):
        parts = split_version('17')
        assert parts.major == 17
        assert parts.minor is None
        assert split_version('garbage').major is None


if __name__ == '__main__':
    unittest.main()

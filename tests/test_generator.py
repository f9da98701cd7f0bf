"""Tests for uaengine.generator and uaengine.forgery."""
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from prometheus_client import REGISTRY

from uaengine.classifier import parse_ua
from uaengine.exceptions import ValidationError
from uaengine.forgery import detect_fake_ua
from uaengine.generator import DEFAULT_UA, TEMPLATES, generate_ua, supported_combinations, template
from uaengine.types import DeviceType

CHROME_WINDOWS = ('Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
                  '(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36')


def _fallbacks() -> float:
    return REGISTRY.get_sample_value('uaengine_generate_fallbacks_total') or 0.0


class TestGenerateUA:
    def test_safari_iphone(self):
        ua = generate_ua({
            'browser': {'name': 'Safari', 'version': '17.0'},
            'os': {'name': 'iOS', 'version': '17.0'},
            'device': {'type': 'mobile'},
        })
        assert 'iPhone' in ua
        assert 'OS 17_0' in ua
        assert 'Version/17.0' in ua

    def test_defaults(self):
        assert generate_ua({}) == DEFAULT_UA
        assert generate_ua() == DEFAULT_UA
        parsed = parse_ua(DEFAULT_UA)
        assert (parsed.browser.name, parsed.browser.major) == ('Chrome', 120)
        assert parsed.cpu.architecture == 'amd64'

    def test_name_only_gets_family_default_version(self):
        ua = generate_ua({'browser': {'name': 'Firefox'}, 'os': {'name': 'Linux'}})
        assert ua == 'Mozilla/5.0 (X11; Linux x86_64; rv:120.0) Gecko/20100101 Firefox/120.0'

    def test_version_only_keeps_default_browser(self):
        assert 'Chrome/124.0.0.0' in generate_ua({'browser': {'version': '124.0.0.0'}})

    def test_no_double_spaces(self):
        for browser, os_name in supported_combinations():
            ua = generate_ua({'browser': {'name': browser}, 'os': {'name': os_name}})
            assert '  ' not in ua
            assert ua == ua.strip()

    @pytest.mark.parametrize('browser,os_name', supported_combinations())
    def test_round_trip(self, browser, os_name):
        parsed = parse_ua(generate_ua({'browser': {'name': browser}, 'os': {'name': os_name}}))
        assert parsed.browser.name == browser
        assert parsed.os.name == os_name

    def test_round_trip_of_parsed_result(self):
        assert generate_ua(parse_ua(CHROME_WINDOWS)) == CHROME_WINDOWS

    def test_windows_versions_and_arch(self):
        ua = generate_ua({'os': {'name': 'Windows', 'version': '7'}, 'cpu': {'architecture': 'ia32'}})
        assert '(Windows NT 6.1)' in ua
        assert parse_ua(ua).os.version == '7'
        assert 'Windows NT 10.0' in generate_ua({'os': {'name': 'Windows', 'version': '11'}})

    def test_android_tablet(self):
        ua = generate_ua({'os': {'name': 'Android'}, 'device': {'type': 'tablet'}})
        parsed = parse_ua(ua)
        assert 'SM-T870' in ua
        assert parsed.device.type == DeviceType.TABLET

    def test_android_model_passthrough(self):
        ua = generate_ua({'os': {'name': 'Android'}, 'device': {'type': 'mobile', 'model': 'Pixel 8'}})
        assert parse_ua(ua).device.model == 'Pixel 8'

    def test_linux_arm(self):
        ua = generate_ua({'os': {'name': 'Linux'}, 'cpu': {'architecture': 'arm64'}})
        assert parse_ua(ua).cpu.architecture == 'arm64'

    def test_chromium_token_follows_blink_engine(self):
        ua = generate_ua({
            'browser': {'name': 'Opera', 'version': '106.0.0.0'},
            'engine': {'name': 'Blink', 'version': '120.0.6099.71'},
        })
        assert 'Chrome/120.0.6099.71' in ua
        assert 'OPR/106.0.0.0' in ua

    def test_edge_chromium_token_follows_edge_major(self):
        ua = generate_ua({'browser': {'name': 'Edge', 'version': '130.0.1.2'}})
        assert 'Chrome/130.0.0.0' in ua
        assert ua.endswith('Edg/130.0.1.2')
        assert parse_ua(ua).engine.version.startswith('130')
        assert 'Chrome/120.0.0.0' in generate_ua({'browser': {'name': 'Opera', 'version': '110.0.0.0'}})


class TestGenerateFallback:
    def test_unknown_os(self):
        before = _fallbacks()
        assert generate_ua({'os': {'name': 'Symbian'}}) == DEFAULT_UA
        assert _fallbacks() == before + 1

    def test_unsupported_pair(self):
        assert generate_ua({'browser': {'name': 'Safari'}, 'os': {'name': 'Windows'}}) == DEFAULT_UA
        assert generate_ua({'browser': {'name': 'Netscape'}}) == DEFAULT_UA

    @pytest.mark.parametrize('spec', ['garbage', {'browser': 'Chrome'}, {'os': 42}])
    def test_malformed_spec(self, spec):
        assert generate_ua(spec) == DEFAULT_UA


class TestTemplates:
    def test_every_template_round_trips(self):
        for name, spec in TEMPLATES.items():
            parsed = parse_ua(template(name))
            assert parsed.browser.name == spec['browser']['name'], name
            assert parsed.os.name == spec['os']['name'], name

    def test_safari_ios_template(self):
        assert 'iPhone' in template('safari_ios')

    def test_unknown_template(self):
        with pytest.raises(ValidationError):
            template('netscape_beos')


class TestDetectFakeUA:
    def test_ios_with_bare_chrome(self):
        report = detect_fake_ua('Mozilla/5.0 (iPhone; CPU iPhone OS 14_0 like Mac OS X) Chrome/90.0')
        assert report.is_fake is True
        assert report.confidence == 100
        assert any('iOS' in r for r in report.reasons)

    def test_genuine_chrome(self):
        report = detect_fake_ua(CHROME_WINDOWS)
        assert report.is_fake is False
        assert report.confidence == 0
        assert report.reasons == []

    def test_generated_uas_look_genuine(self):
        for browser, os_name in supported_combinations():
            ua = generate_ua({'browser': {'name': browser}, 'os': {'name': os_name}})
            assert detect_fake_ua(ua).confidence == 0, ua

    def test_windows_xp_alone_is_not_enough(self):
        report = detect_fake_ua('Mozilla/5.0 (Windows NT 5.1) AppleWebKit/537.36 '
                                '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36')
        assert report.confidence == 50
        assert report.is_fake is False

    def test_safari_token_mismatch(self):
        report = detect_fake_ua(CHROME_WINDOWS.replace('Safari/537.36', 'Safari/600.1'))
        assert report.confidence == 30

    def test_chrome_without_webkit(self):
        report = detect_fake_ua('Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0.0.0 Safari/537.36')
        assert report.confidence == 40

    def test_too_many_tokens(self):
        ua = ('Mozilla/5.0 (Windows NT 10.0) AppleWebKit/537.36 Chrome/120.0 Safari/537.36 '
              'Firefox/120.0 OPR/100.0 Edg/120.0')
        assert detect_fake_ua(ua).confidence == 20

    def test_length_and_prefix(self):
        assert detect_fake_ua('curl/8.0').confidence == 30
        assert detect_fake_ua('Mozilla/5.0 ' + 'x' * 600).confidence == 10
        assert detect_fake_ua(None).confidence == 30

    def test_to_dict(self):
        data = detect_fake_ua('curl/8.0').to_dict()
        assert set(data) == {'is_fake', 'confidence', 'reasons'}

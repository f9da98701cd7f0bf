import logging

from flask import Blueprint, jsonify, request

from ..engine import UA
from ..exceptions import InvalidRangeError, ValidationError
from ..versioning import parse_version_range

ua_bp = Blueprint('ua', __name__, url_prefix='/api/ua')

logger = logging.getLogger('uaengine.routes')


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('JSON body must be an object')
    return data


def _browser_summary(parsed) -> dict:
    return {'name': parsed.browser.name, 'version': parsed.browser.version}


@ua_bp.route('/parse', methods=['GET'])
def parse():
    # no ?ua= means "classify the caller"
    parsed = UA.parse(request.args.get('ua'))
    return jsonify(parsed.to_dict())


@ua_bp.route('/generate', methods=['POST'])
def generate():
    spec = _json_body()
    return jsonify({'ua': UA.stringify(spec)})


@ua_bp.route('/satisfies', methods=['GET'])
def satisfies():
    range_exprs = request.args.getlist('range')
    if not range_exprs:
        raise ValidationError('query parameter "range" is required')
    for expr in range_exprs:
        if parse_version_range(expr) is None:
            raise InvalidRangeError(expr)
    parsed = UA.parse(request.args.get('ua'))
    result = UA.satisfies(parsed, range_exprs)
    logger.debug('satisfies ranges=%s browser=%s result=%s', range_exprs, parsed.browser.name, result)
    return jsonify({'satisfies': result, 'ranges': range_exprs, 'browser': _browser_summary(parsed)})


@ua_bp.route('/audit', methods=['GET'])
def audit():
    parsed = UA.parse(request.args.get('ua'))
    return jsonify({
        'browser': _browser_summary(parsed),
        'modern': UA.is_modern(parsed),
        'outdated': UA.is_outdated(parsed),
        'security_level': UA.security_level(parsed).value,
        'fake': UA.detect_fake(parsed).to_dict(),
    })


@ua_bp.route('/compare', methods=['POST'])
def compare():
    data = _json_body()
    a, b = data.get('a'), data.get('b')
    if not isinstance(a, str) or not isinstance(b, str):
        raise ValidationError('"a" and "b" must both be UA strings')
    ordering = UA.compare(a, b)
    return jsonify({'result': int(ordering), 'ordering': ordering.name})

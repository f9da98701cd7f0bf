import time

from flask import Blueprint, Response, jsonify

from .. import metrics
from ..config import get_settings
from ..engine import UA

system_bp = Blueprint('system', __name__)

_START_TIME = time.time()


@system_bp.route('/health', methods=['GET'])
def health():
    uptime = time.time() - _START_TIME
    return jsonify({'status': 'ok', 'uptime_seconds': round(uptime, 2)})


@system_bp.route('/version', methods=['GET'])
def version():
    settings = get_settings()
    uptime = time.time() - _START_TIME
    return jsonify({
        'version': settings.version,
        'env': settings.env,
        'uptime_seconds': round(uptime, 2),
        'features': {'plugins': UA.enable_plugins},
        'engine': UA.get_stats(),
    })


@system_bp.route('/metrics/prometheus', methods=['GET'])
def metrics_prometheus():
    return Response(metrics.get_metrics(), content_type=metrics.get_content_type())

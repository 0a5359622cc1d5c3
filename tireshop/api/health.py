from flask import Blueprint, jsonify
from tireshop.extensions import db
from tireshop.utils.timezone_utils import utc_now

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health():
    healthy = db.health_check()
    body = {
        'status': 'healthy' if healthy else 'unhealthy',
        'database': 'ok' if healthy else 'unreachable',
        'timestamp': utc_now().isoformat(),
    }
    return jsonify(body), 200 if healthy else 503

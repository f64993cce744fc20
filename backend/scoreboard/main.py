from datetime import datetime, timezone
from flask import Blueprint, jsonify

main = Blueprint('main', __name__)

@main.route('/healthcheck')
def healthcheck():
    return jsonify({'status': 'ok', 'timestamp': datetime.now(timezone.utc).isoformat()})

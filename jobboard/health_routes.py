"""
Health check route for database monitoring
"""
import time
from datetime import datetime

from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from jobboard import __version__
from jobboard.db import db
from jobboard.simple_logger import get_logger

logger = get_logger("health")
health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health_check():
    start_time = time.time()
    try:
        db.session.execute(text("SELECT 1"))
        db_healthy = True
    except SQLAlchemyError as e:
        logger.error(f"Health check database probe failed: {e}")
        db.session.rollback()
        db_healthy = False

    health_status = {
        'status': 'healthy' if db_healthy else 'unhealthy',
        'timestamp': datetime.utcnow().isoformat(),
        'version': __version__,
        'response_time_ms': round((time.time() - start_time) * 1000, 2),
        'database': {'healthy': db_healthy},
    }
    return jsonify(health_status), 200 if db_healthy else 503

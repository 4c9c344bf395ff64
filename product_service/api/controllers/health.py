"""
Health check endpoints for product service
These endpoints are used by monitoring systems, load balancers, and Kubernetes
"""

from flask import Blueprint, jsonify, current_app
from datetime import datetime
from sqlalchemy import text
import os
import time
import logging

from product_service.database import db
from product_service.utils.cache import get_redis

logger = logging.getLogger(__name__)

SERVICE_NAME = 'product-service'
STARTED_AT = time.time()

# Create blueprint for health endpoints
health_bp = Blueprint('health', __name__)


def _timestamp():
    return datetime.utcnow().isoformat() + 'Z'


def check_database():
    """Run a trivial query against the database"""
    start = time.time()
    try:
        db.session.execute(text('SELECT 1'))
        return {'status': 'healthy', 'response_time': round(time.time() - start, 4)}
    except Exception as e:
        db.session.rollback()
        logger.error(f"Database readiness check failed: {e}")
        return {'status': 'unhealthy', 'error': str(e)}


def check_cache():
    """Ping Redis when the response cache is enabled"""
    if not current_app.config.get('CACHE_ENABLED'):
        return {'status': 'disabled'}

    client = get_redis()
    if client is None:
        return {'status': 'unhealthy', 'error': 'Redis client not connected'}

    try:
        client.ping()
        return {'status': 'healthy'}
    except Exception as e:
        logger.error(f"Redis readiness check failed: {e}")
        return {'status': 'unhealthy', 'error': str(e)}


@health_bp.route('/health', methods=['GET'])
def health():
    """Main health check endpoint"""
    return jsonify({
        'status': 'healthy',
        'service': os.environ.get('NAME', SERVICE_NAME),
        'timestamp': _timestamp(),
        'version': os.environ.get('VERSION', '1.0.0'),
        'environment': os.environ.get('FLASK_ENV', 'development'),
    }), 200


@health_bp.route('/health/ready', methods=['GET'])
def readiness():
    """Readiness probe - checks if service is ready to handle traffic"""
    checks = {
        'database': check_database(),
        'cache': check_cache(),
    }
    ready = all(check['status'] != 'unhealthy' for check in checks.values())

    if not ready:
        logger.warning('Readiness check failed', extra={
            'checks': {key: check['status'] for key, check in checks.items()}
        })

    return jsonify({
        'status': 'ready' if ready else 'not ready',
        'service': SERVICE_NAME,
        'timestamp': _timestamp(),
        'checks': checks,
    }), 200 if ready else 503


@health_bp.route('/health/live', methods=['GET'])
def liveness():
    """Liveness probe - checks if service is alive and responsive"""
    return jsonify({
        'status': 'alive',
        'service': SERVICE_NAME,
        'timestamp': _timestamp(),
        'uptime': round(time.time() - STARTED_AT, 2),
    }), 200

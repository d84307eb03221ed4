"""
Health check routes for monitoring application status.

Provides a lightweight liveness endpoint and a detailed endpoint that
checks database connectivity and reports how many users are stored.
"""

import logging
from datetime import datetime, timezone

from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from libraryapp.db import database as db_module
from libraryapp.db.userdb import SqlAlchemyUserStore

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__)

SERVICE_NAME = "libraryapp-api"


@health_bp.route("/health", methods=["GET"])
def health_check():
    """
    Basic health check endpoint.

    Returns a simple status indicating the application is running.
    """
    return jsonify(
        {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": SERVICE_NAME,
        }
    ), 200


@health_bp.route("/health/detailed", methods=["GET"])
def detailed_health_check():
    """
    Detailed health check endpoint.

    Verifies the database answers a trivial query and reports the user
    count. Responds 503 when the database check fails.
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": SERVICE_NAME,
        "checks": {
            "application": {"status": "healthy"},
            "database": {"status": "unknown"},
        },
    }

    overall_healthy = True

    db_session = db_module.SessionLocal()
    try:
        row = db_session.execute(text("SELECT 1 as health_check")).fetchone()

        if row and row[0] == 1:
            health_status["checks"]["database"] = {
                "status": "healthy",
                "message": "Database connection successful",
                "user_count": SqlAlchemyUserStore(db_session).count(),
            }
        else:
            health_status["checks"]["database"] = {
                "status": "unhealthy",
                "message": "Database query returned unexpected result",
            }
            overall_healthy = False

    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        health_status["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database query failed: {type(e).__name__}",
        }
        overall_healthy = False

    finally:
        db_session.close()

    health_status["status"] = "healthy" if overall_healthy else "unhealthy"
    status_code = 200 if overall_healthy else 503

    return jsonify(health_status), status_code

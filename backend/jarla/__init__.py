import os

from flask import Flask, jsonify
from sqlalchemy import text

from jarla.config import Config
from jarla.extensions import db, migrate, cors, login_manager
from jarla.segments.segment_auth import auth_bp
from jarla.segments.segment_profiles import profiles_bp
from jarla.segments.segment_business_profiles import business_profiles_bp
from jarla.segments.segment_campaigns import campaigns_bp
from jarla.segments.segment_business_campaigns import business_campaigns_bp
from jarla.segments.segment_submissions import submissions_bp
from jarla.segments.segment_earnings import earnings_bp
from jarla.segments.segment_deals import deals_bp
from jarla.segments.segment_favorites import favorites_bp
from jarla.segments.segment_tiktok_accounts import tiktok_accounts_bp
from jarla.segments.segment_assistant import assistant_bp
from jarla.segments.segment_onboarding import onboarding_bp
from jarla.segments.segment_tiktok_stats import tiktok_stats_bp
from jarla.segments.segment_business_analytics import business_analytics_bp


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    env = (app.config.get("JARLA_ENV") or "dev").strip().lower()

    # Production safety checks
    if env in ("prod", "production"):
        secret = (app.config.get("SECRET_KEY") or "").strip()
        if not secret or len(secret) < 16:
            raise RuntimeError("SECRET_KEY must be set and at least 16 chars in production")
        if not (os.getenv("DATABASE_URL") or "").strip() and not (os.getenv("SQLALCHEMY_DATABASE_URI") or "").strip():
            raise RuntimeError("DATABASE_URL (or SQLALCHEMY_DATABASE_URI) must be set in production")

    # Ensure instance dir exists for SQLite paths
    database_url = app.config["SQLALCHEMY_DATABASE_URI"]
    if database_url.startswith("sqlite:///") and database_url != "sqlite:///:memory:":
        os.makedirs(app.config["INSTANCE_DIR"], exist_ok=True)

    # CORS configuration
    cors_origins = (app.config.get("CORS_ORIGINS") or "").strip()
    if env in ("prod", "production"):
        origins = [o.strip() for o in cors_origins.split(",") if o.strip()]
    else:
        origins = ["*"] if not cors_origins else [o.strip() for o in cors_origins.split(",") if o.strip()]
    cors.init_app(app, resources={r"/api/*": {"origins": origins}})

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    # Registers the Flask-Login loaders
    from jarla import auth  # noqa: F401
    from jarla import models  # noqa: F401

    # Register API routes
    app.register_blueprint(auth_bp)
    app.register_blueprint(profiles_bp)
    app.register_blueprint(business_profiles_bp)
    app.register_blueprint(campaigns_bp)
    app.register_blueprint(business_campaigns_bp)
    app.register_blueprint(submissions_bp)
    app.register_blueprint(earnings_bp)
    app.register_blueprint(deals_bp)
    app.register_blueprint(favorites_bp)
    app.register_blueprint(tiktok_accounts_bp)
    app.register_blueprint(assistant_bp)
    app.register_blueprint(onboarding_bp)
    app.register_blueprint(tiktok_stats_bp)
    app.register_blueprint(business_analytics_bp)

    from jarla.jobs.stats_refresher import register_cli
    register_cli(app)

    state = {"tables_ready": not app.config.get("AUTO_CREATE_TABLES", True)}

    @app.before_request
    def _ensure_tables_once():
        if state["tables_ready"]:
            return
        try:
            db.create_all()
        except Exception as e:
            app.logger.error("create_all failed: %s", e)
        state["tables_ready"] = True

    # Health check
    @app.get("/api/health")
    def health():
        db_state = "ok"
        try:
            db.session.execute(text("SELECT 1"))
        except Exception:
            db_state = "fail"
        return jsonify({
            "ok": True,
            "service": "jarla-backend",
            "env": env,
            "db": db_state,
        })

    @app.get("/api/version")
    def version():
        def _get_alembic_head() -> str:
            try:
                from alembic.config import Config as AlembicConfig
                from alembic.script import ScriptDirectory
                migrations_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "migrations"))
                cfg = AlembicConfig(os.path.join(migrations_dir, "alembic.ini"))
                cfg.set_main_option("script_location", migrations_dir)
                script = ScriptDirectory.from_config(cfg)
                heads = script.get_heads()
                return heads[0] if heads else "unknown"
            except Exception:
                return "unknown"

        return jsonify({
            "ok": True,
            "alembic_head": _get_alembic_head(),
        })

    return app

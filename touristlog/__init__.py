# touristlog/__init__.py
import uuid
from datetime import datetime

from flask import Flask, g, request
from jinja2 import select_autoescape
from werkzeug.middleware.proxy_fix import ProxyFix

from touristlog.extensions import db, migrate, mail, csrf
from touristlog.services.visitor_store import VisitorStore


def create_app(config_object: str | object = "config.Config"):
    app = Flask(
        __name__,
        instance_relative_config=True,
        template_folder="../templates",
        static_folder="../static",
    )

    # 1) Base config object (config.py at project root)
    app.config.from_object(config_object)

    # 2) Instance overrides (instance/config.py) – safe if missing
    if not app.config.get("TESTING"):
        app.config.from_pyfile("config.py", silent=True)

        # 3) Environment overrides (e.g., FLASK_ADMIN_PASSKEY)
        app.config.from_prefixed_env()

    # 4) Init extensions AFTER config
    db.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)
    csrf.init_app(app)

    # one store per process, handed to the views through app.extensions
    app.extensions["visitor_store"] = VisitorStore(
        db,
        strategy=app.config.get("CONTROL_NUMBER_STRATEGY", "counter"),
    )

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    app.jinja_env.autoescape = select_autoescape(["html", "htm", "xml"])
    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)

    @app.context_processor
    def inject_now():
        return {"now": datetime.now}

    @app.before_request
    def _trace_in():
        g.reqid = str(uuid.uuid4())[:8]
        if request.endpoint == "static":
            return
        app.logger.info(
            "[%s] → %s %s ep=%s args=%s",
            g.reqid, request.method, request.path, request.endpoint,
            dict(request.args),
        )

    @app.after_request
    def _trace_out(resp):
        rid = getattr(g, "reqid", "????")
        loc = resp.headers.get("Location", "")
        if loc:
            app.logger.info("[%s] ← %s redirect to %s", rid, resp.status, loc)
        else:
            app.logger.info("[%s] ← %s", rid, resp.status)
        return resp

    @app.route("/healthz")
    def healthz():
        return "ok", 200

    # 5) Blueprints
    from touristlog.visitors.routes import public_bp
    from touristlog.admin import admin_bp
    from touristlog.api.routes import api_bp

    app.register_blueprint(public_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(api_bp)

    # JSON clients don't carry a CSRF token
    csrf.exempt(api_bp)

    from touristlog.cli import register_cli
    register_cli(app)

    # 6) Create tables
    from touristlog import models  # noqa: F401  (register tables)
    if app.config.get("AUTO_CREATE_TABLES", True):
        with app.app_context():
            db.create_all()

    if not app.config.get("ADMIN_PASSKEY"):
        app.logger.warning("ADMIN_PASSKEY is not set; the admin dashboard cannot be unlocked.")

    return app

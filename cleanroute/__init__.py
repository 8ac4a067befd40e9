import logging
import random
from typing import Optional

from flask import Flask

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
LOG_LEVEL = logging.INFO


def _configure_logging() -> None:
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    root_logger.setLevel(LOG_LEVEL)


def create_app(planner=None, rng: Optional[random.Random] = None) -> Flask:
    """Application factory for the CleanRoute service.

    ``planner`` and ``rng`` can be injected (tests use fakes); by default the
    planner talks to the configured external services.
    """
    _configure_logging()

    app = Flask(__name__)

    # Late imports to avoid circulars
    from .planner import PlanSession, RoutePlanner
    from .routes import bp as main_bp

    app.extensions["plan_session"] = PlanSession(planner or RoutePlanner())
    app.extensions["conditions_rng"] = rng or random.Random()

    app.register_blueprint(main_bp)

    return app

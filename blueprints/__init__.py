"""Flask Blueprints for the PAPI proxy."""

from blueprints.health import health_bp
from blueprints.customers import customers_bp, init_customers_blueprint
from blueprints.passthrough import passthrough_bp, init_passthrough_blueprint

__all__ = [
    "health_bp",
    "customers_bp",
    "passthrough_bp",
    "init_customers_blueprint",
    "init_passthrough_blueprint",
]

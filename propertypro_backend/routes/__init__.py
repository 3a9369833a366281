from .health import bp as health_bp
from .leases import bp as leases_bp
from .payments import bp as payments_bp

__all__ = ["health_bp", "leases_bp", "payments_bp"]

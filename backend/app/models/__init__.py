# Import models here so Alembic can discover metadata.
from app.models.admin_user import AdminUser  # noqa: F401

# Pricing
from app.models.standard_price import StandardPrice  # noqa: F401
from app.models.date_price import DatePrice  # noqa: F401

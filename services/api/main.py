from __future__ import annotations

from freight_pricing.config import load_settings
from freight_pricing.http_api import create_app
from freight_pricing.logging_config import setup_logging

# Environment configuration
settings = load_settings()

# Setup logging
setup_logging(environment=settings.environment, project_id=settings.project_id)

app = create_app()

from freight_pricing.config import Settings, load_settings


def test_defaults():
    assert load_settings({}) == Settings()


def test_reads_environment():
    settings = load_settings(
        {
            "ENVIRONMENT": "prod",
            "PROJECT_ID": "logistics-prod",
            "PRICING_API_BASE_URL": "https://backoffice.example.com/",
            "PRICING_API_TIMEOUT": "5",
            "PRICING_API_TOKEN": "",
        }
    )

    assert settings.environment == "prod"
    assert settings.project_id == "logistics-prod"
    assert settings.api_base_url == "https://backoffice.example.com"
    assert settings.api_timeout == 5.0
    assert settings.api_token is None

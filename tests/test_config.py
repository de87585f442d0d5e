"""Settings parsing tests."""

from app.config.settings import Settings


def test_private_key_newlines_are_unescaped():
    settings = Settings(firebase_private_key="-----BEGIN KEY-----\\nabc\\n-----END KEY-----")

    assert settings.firebase_private_key == "-----BEGIN KEY-----\nabc\n-----END KEY-----"


def test_list_fields_accept_json_strings():
    settings = Settings(
        cors_origins='["https://a.example.com"]',
        default_permissions='["view_products"]',
    )

    assert settings.cors_origins == ["https://a.example.com"]
    assert settings.default_permissions == ["view_products"]


def test_list_fields_from_environment(monkeypatch):
    monkeypatch.setenv("DEFAULT_PERMISSIONS", '["manage_orders", "view_inventory"]')

    assert Settings().default_permissions == ["manage_orders", "view_inventory"]


def test_blank_schema_means_no_schema():
    assert Settings(database_schema="  ").database_schema is None
    assert Settings(database_schema="employeecenter").database_schema == "employeecenter"


def test_provisioning_defaults():
    settings = Settings()

    assert settings.max_batch_size == 50
    assert settings.password_length == 8
    assert settings.default_role == "employee"
    assert settings.record_store_backend == "firebase"


def test_is_production():
    assert Settings(environment="Production").is_production is True
    assert Settings(environment="development").is_production is False

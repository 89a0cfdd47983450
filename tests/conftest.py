"""Pytest configuration and shared fixtures."""

import pytest

from postman_exporter.config import reset_settings


@pytest.fixture(autouse=True)
def reset_config_settings(monkeypatch):
    """Reset the settings singleton before and after each test.

    This ensures that environment variable changes made by monkeypatch
    are properly reflected in the settings, since pydantic-settings
    reads env vars at instantiation time.
    """
    for var in ("POSTMAN_API_KEY", "DEBUG", "OUTPUT_DIR", "WORK_DIR", "CONVERTER"):
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def collection_body() -> dict:
    """A ``GET /collections/{uid}`` response with one folder and one root request."""
    return {
        "collection": {
            "info": {
                "_postman_id": "col1",
                "name": "User API",
                "description": "Manage users",
                "schema": "https://schema.getpostman.com/json/collection/v2.1.0/collection.json",
            },
            "item": [
                {
                    "name": "Users",
                    "item": [
                        {
                            "name": "Get user",
                            "request": {
                                "method": "GET",
                                "header": [
                                    {"key": "Accept", "value": "application/json"},
                                    {"key": "X-Trace", "value": "abc"},
                                ],
                                "url": {
                                    "raw": "https://api.example.com/users/:id?expand=roles",
                                    "protocol": "https",
                                    "host": ["api", "example", "com"],
                                    "path": ["users", ":id"],
                                    "query": [{"key": "expand", "value": "roles"}],
                                    "variable": [
                                        {"key": "id", "value": "42", "description": "User id"}
                                    ],
                                },
                            },
                            "response": [
                                {
                                    "name": "Found",
                                    "code": 200,
                                    "body": '{"id": 42, "name": "Ada"}',
                                }
                            ],
                        },
                        {
                            "name": "Create user",
                            "request": {
                                "method": "POST",
                                "url": "https://api.example.com/users",
                                "body": {
                                    "mode": "raw",
                                    "raw": '{"name": "Ada", "admin": false}',
                                },
                            },
                        },
                    ],
                },
                {
                    "name": "Health",
                    "request": {"method": "GET", "url": "{{baseUrl}}/health"},
                },
            ],
            "variable": [{"key": "version", "value": "2.3.0"}],
        }
    }

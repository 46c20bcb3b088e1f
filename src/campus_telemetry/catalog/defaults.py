"""Built-in campus catalog.

The only shipped copy of the catalog: config.defaults.yaml leaves
``catalog.campuses`` unset so this list applies unless config.yaml overrides it.
"""

from __future__ import annotations

from campus_telemetry.catalog.models import Campus

_DEFAULT_CAMPUSES: list[dict] = [
    {
        "id": "campus-1",
        "name": "Green Valley Campus",
        "location": {
            "address": "123 Renewable Street",
            "city": "EcoCity",
            "state": "CA",
            "country": "USA",
            "zipCode": "90210",
            "coordinates": {"latitude": 34.0522, "longitude": -118.2437},
        },
        "energySources": {
            "solar": {"enabled": True, "capacity": 500, "panels": 200, "efficiency": 0.22},
            "wind": {"enabled": True, "capacity": 300, "turbines": 5, "cutInSpeed": 3.5},
            "battery": {
                "enabled": True,
                "capacity": 1000,
                "type": "lithium-ion",
                "cycleLife": 5000,
            },
        },
    },
    {
        "id": "campus-2",
        "name": "Solar Ridge Campus",
        "location": {
            "address": "456 Solar Avenue",
            "city": "SunCity",
            "state": "AZ",
            "country": "USA",
            "zipCode": "85001",
            "coordinates": {"latitude": 33.4484, "longitude": -112.0740},
        },
        "energySources": {
            "solar": {"enabled": True, "capacity": 750, "panels": 300, "efficiency": 0.24},
            "wind": {"enabled": False, "capacity": 0, "turbines": 0, "cutInSpeed": 0},
            "battery": {
                "enabled": True,
                "capacity": 1500,
                "type": "lithium-ion",
                "cycleLife": 6000,
            },
        },
    },
]


def default_campuses() -> list[Campus]:
    """Return fresh model instances for the built-in catalog."""
    return [Campus.model_validate(raw) for raw in _DEFAULT_CAMPUSES]

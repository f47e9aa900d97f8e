"""
Reference catalog for the Bangkok market.

Providers and services are shared, read-only data. ``build_catalog``
returns fresh entity instances on every call so callers can never mutate
the seed.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from petbkk.domain.entities import WEEKDAYS, DayHours, Provider, Service

CATALOG_CREATED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _hours(open_: str, close: str, closed_on=()) -> Dict[str, Optional[DayHours]]:
    return {
        day: None if day in closed_on else DayHours(open=open_, close=close)
        for day in WEEKDAYS
    }


PROVIDER_SEED = [
    {
        "id": "8f2b6c1e-1a3d-4c5e-9f70-1b2c3d4e5f01",
        "business_name": "Sukhumvit Animal Hospital",
        "business_type": "veterinary",
        "description": "24-hour small animal hospital with in-house lab and X-ray.",
        "address": "123 Sukhumvit Soi 39",
        "district": "Watthana",
        "phone": "+6622581234",
        "email": "care@sukhumvitvet.example",
        "website": "https://sukhumvitvet.example",
        "rating": 4.8,
        "review_count": 312,
        "opening_hours": _hours("08:00", "20:00"),
        "is_verified": True,
        "services": [
            {
                "id": "a1c0e7d2-5b4f-4e3a-8c21-0d9e8f7a6b01",
                "name": "General Check-up",
                "description": "Full physical examination and consultation.",
                "duration_minutes": 30,
                "price_min": 500,
                "price_max": 800,
                "pet_types": ["dog", "cat", "rabbit"],
            },
            {
                "id": "a1c0e7d2-5b4f-4e3a-8c21-0d9e8f7a6b02",
                "name": "Vaccination",
                "description": "Core vaccines with health certificate.",
                "duration_minutes": 30,
                "price_min": 350,
                "price_max": 350,
                "pet_types": ["dog", "cat"],
            },
            {
                "id": "a1c0e7d2-5b4f-4e3a-8c21-0d9e8f7a6b03",
                "name": "Dental Scaling",
                "description": "Scaling and polishing under anaesthesia.",
                "duration_minutes": 90,
                "price_min": 2500,
                "price_max": 4500,
                "pet_types": ["dog", "cat"],
                "is_available": False,
            },
        ],
    },
    {
        "id": "8f2b6c1e-1a3d-4c5e-9f70-1b2c3d4e5f02",
        "business_name": "Happy Paws Grooming",
        "business_type": "grooming",
        "description": "Bath, haircut and spa for dogs and cats.",
        "address": "45 Ari Soi 4",
        "district": "Phaya Thai",
        "phone": "+6621234567",
        "email": None,
        "website": None,
        "rating": 4.6,
        "review_count": 128,
        "opening_hours": _hours("10:00", "19:00", closed_on=("monday",)),
        "is_verified": True,
        "services": [
            {
                "id": "a1c0e7d2-5b4f-4e3a-8c21-0d9e8f7a6b11",
                "name": "Bath & Brush",
                "description": None,
                "duration_minutes": 60,
                "price_min": 400,
                "price_max": 700,
                "pet_types": ["dog", "cat"],
            },
            {
                "id": "a1c0e7d2-5b4f-4e3a-8c21-0d9e8f7a6b12",
                "name": "Full Groom",
                "description": "Bath, haircut, nail trim and ear cleaning.",
                "duration_minutes": 120,
                "price_min": 800,
                "price_max": 1500,
                "pet_types": ["dog"],
            },
        ],
    },
    {
        "id": "8f2b6c1e-1a3d-4c5e-9f70-1b2c3d4e5f03",
        "business_name": "Riverside Pet Hotel",
        "business_type": "boarding",
        "description": "Air-conditioned suites with daily play time.",
        "address": "88 Charoen Nakhon Road",
        "district": "Khlong San",
        "phone": "+6624371111",
        "email": "stay@riversidepethotel.example",
        "website": None,
        "rating": 4.4,
        "review_count": 76,
        "opening_hours": _hours("09:00", "18:00"),
        "is_verified": False,
        "services": [
            {
                "id": "a1c0e7d2-5b4f-4e3a-8c21-0d9e8f7a6b21",
                "name": "Overnight Stay",
                "description": "One night in a standard suite.",
                "duration_minutes": 30,
                "price_min": 600,
                "price_max": 900,
                "pet_types": [],
            },
        ],
    },
    {
        "id": "8f2b6c1e-1a3d-4c5e-9f70-1b2c3d4e5f04",
        "business_name": "Chatuchak Pet Supplies",
        "business_type": "pet_shop",
        "description": "Food, toys and accessories.",
        "address": "Chatuchak Weekend Market Section 13",
        "district": "Chatuchak",
        "phone": "+6629998888",
        "email": None,
        "website": None,
        "rating": 4.1,
        "review_count": 54,
        "opening_hours": _hours(
            "09:00", "18:00", closed_on=("monday", "tuesday", "wednesday", "thursday")
        ),
        "is_verified": False,
        "services": [
            {
                "id": "a1c0e7d2-5b4f-4e3a-8c21-0d9e8f7a6b31",
                "name": "Diet Consultation",
                "description": None,
                "duration_minutes": 30,
                "price_min": 0,
                "price_max": 0,
                "pet_types": [],
            },
        ],
    },
    {
        "id": "8f2b6c1e-1a3d-4c5e-9f70-1b2c3d4e5f05",
        "business_name": "Good Dog Academy",
        "business_type": "training",
        "description": "Puppy classes and behaviour coaching.",
        "address": "12 Ratchada Soi 7",
        "district": "Huai Khwang",
        "phone": "+6626427777",
        "email": "hello@gooddog.example",
        "website": "https://gooddog.example",
        "rating": 4.9,
        "review_count": 41,
        "opening_hours": _hours("09:00", "17:00", closed_on=("sunday",)),
        "is_verified": True,
        "services": [
            {
                "id": "a1c0e7d2-5b4f-4e3a-8c21-0d9e8f7a6b41",
                "name": "Puppy Basics (1 session)",
                "description": None,
                "duration_minutes": 60,
                "price_min": 1200,
                "price_max": 1200,
                "pet_types": ["dog"],
            },
        ],
    },
    {
        "id": "8f2b6c1e-1a3d-4c5e-9f70-1b2c3d4e5f06",
        "business_name": "Sathorn Pet Sitters",
        "business_type": "pet_sitting",
        "description": "Home visits while you are away.",
        "address": "200 Sathorn Road",
        "district": "Sathon",
        "phone": "+6626701234",
        "email": None,
        "website": None,
        "rating": 4.3,
        "review_count": 19,
        "opening_hours": _hours("07:00", "21:00"),
        "is_verified": False,
        "services": [
            {
                "id": "a1c0e7d2-5b4f-4e3a-8c21-0d9e8f7a6b51",
                "name": "Home Visit",
                "description": "Feeding, litter and a 30 minute walk.",
                "duration_minutes": 60,
                "price_min": 450,
                "price_max": 600,
                "pet_types": [],
            },
        ],
    },
]


def build_catalog() -> List[Provider]:
    """Fresh Provider entities, each with its ordered services attached."""
    providers = []
    for seed in PROVIDER_SEED:
        fields = {key: value for key, value in seed.items() if key != "services"}
        provider = Provider(
            **fields,
            province="Bangkok",
            created_at=CATALOG_CREATED_AT,
        )
        provider.opening_hours = {
            day: DayHours(hours.open, hours.close) if hours else None
            for day, hours in seed["opening_hours"].items()
        }
        provider.services = [
            Service(
                provider_id=provider.id,
                created_at=CATALOG_CREATED_AT,
                **{"is_available": True, **service},
            )
            for service in seed["services"]
        ]
        providers.append(provider)
    return providers

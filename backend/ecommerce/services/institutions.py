# backend/ecommerce/services/institutions.py
"""
Catálogo estático de instituciones de destino para los pedidos de mensajería.
"""

from typing import Any, Dict, List, Optional

INSTITUTIONS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "name": "Institution 12 (formerly 99)",
        "code": "INST_12",
        "address": "City, ... street, 12",
        "phone": "+7 XXX XXX-XX-XX",
        "working_hours": "09:00-18:00",
    },
    {
        "id": 2,
        "name": "Institution 14 (formerly 103)",
        "code": "INST_14",
        "address": "City, ... street, 14",
        "phone": "+7 XXX XXX-XX-XX",
        "working_hours": "09:00-18:00",
    },
    {
        "id": 3,
        "name": "Institution 57 (formerly 71)",
        "code": "INST_57",
        "address": "City, ... street, 57",
        "phone": "+7 XXX XXX-XX-XX",
        "working_hours": "09:00-18:00",
    },
    {
        "id": 4,
        "name": "Institution 25",
        "code": "INST_25",
        "address": "City, ... street, 25",
        "phone": "+7 XXX XXX-XX-XX",
        "working_hours": "10:00-19:00",
    },
    {
        "id": 5,
        "name": "Institution 33",
        "code": "INST_33",
        "address": "City, ... street, 33",
        "phone": "+7 XXX XXX-XX-XX",
        "working_hours": "08:00-17:00",
    },
]


def get_all_institutions() -> List[Dict[str, Any]]:
    return INSTITUTIONS


def get_institution_by_id(institution_id: int) -> Optional[Dict[str, Any]]:
    return next((inst for inst in INSTITUTIONS if inst["id"] == int(institution_id)), None)


def get_institution_by_code(code: str) -> Optional[Dict[str, Any]]:
    return next((inst for inst in INSTITUTIONS if inst["code"] == code), None)

"""Reference data shared by the booking API, the e-mail templates and the front end.

Service codes and time slots are defined only here; everything else looks them up.
"""
from typing import Dict, List, Optional

SERVICES: List[Dict] = [
    {"code": "cata-intima", "name": "Cata Íntima", "duration": 45, "price": 8000},
    {"code": "cata-pareja", "name": "Cata de Pareja", "duration": 60, "price": 12000},
    {"code": "cata-grupal", "name": "Cata Grupal", "duration": 90, "price": 18000},
    {"code": "consulta-productos", "name": "Consulta de Productos", "duration": 30, "price": 4000},
    {"code": "compra-perfumes", "name": "Compra Personalizada", "duration": 60, "price": 6000},
]

TIME_SLOTS: List[str] = [
    "10:00", "11:00", "12:00", "14:00", "15:00", "16:00", "17:00", "18:00"
]

SERVICE_CODES = [service["code"] for service in SERVICES]


def get_service(code: str) -> Optional[Dict]:
    return next((service for service in SERVICES if service["code"] == code), None)


def service_name(code: str) -> str:
    service = get_service(code)
    return service["name"] if service else code


def service_duration(code: str) -> Optional[str]:
    """Duration tag stored with an appointment, e.g. '45 min'."""
    service = get_service(code)
    return f"{service['duration']} min" if service else None


def service_label(code: str) -> str:
    """Label used in e-mails, e.g. 'Cata Íntima (45 min)'. Unknown codes are returned as-is."""
    service = get_service(code)
    if not service:
        return code
    return f"{service['name']} ({service['duration']} min)"


def format_price(amount: int) -> str:
    return f"${amount:,}"

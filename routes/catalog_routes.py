from fastapi import APIRouter
from config.catalog import SERVICES, TIME_SLOTS, format_price, service_label

router = APIRouter()


@router.get("/")
def get_catalog():
    services = [
        {
            **service,
            "label": service_label(service["code"]),
            "price_label": format_price(service["price"])
        }
        for service in SERVICES
    ]
    return {"services": services, "time_slots": TIME_SLOTS}

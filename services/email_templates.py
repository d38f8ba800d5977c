from html import escape
from typing import Dict, Tuple
from config.catalog import service_label
from config.settings import get_contact_email, get_logo_url, get_studio_address

BRAND_NAME = "NUVÓ Essence Ritual"


def _details(appointment: Dict, extra_rows: str = "") -> str:
    return (
        '<div style="margin: 20px 0; padding: 15px; background-color: #E7DCD1; border-radius: 8px;">'
        f'<p style="margin: 5px 0;"><strong>Servicio:</strong> {escape(service_label(appointment.get("service", "")))}</p>'
        f'<p style="margin: 5px 0;"><strong>Fecha:</strong> {escape(str(appointment.get("date", "")))}</p>'
        f'<p style="margin: 5px 0;"><strong>Hora:</strong> {escape(str(appointment.get("time", "")))}</p>'
        f'{extra_rows}'
        '</div>'
    )


def _layout(heading: str, body: str, footer_note: str) -> str:
    contact_email = escape(get_contact_email())
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; '
        'border: 1px solid #E7DCD1; border-radius: 8px;">'
        '<div style="text-align: center; margin-bottom: 20px;">'
        f'<img src="{escape(get_logo_url())}" alt="{BRAND_NAME}" style="max-width: 150px; margin-bottom: 10px;" />'
        '</div>'
        '<div style="background-color: #FAF9F6; padding: 20px; border-radius: 8px; margin-bottom: 20px;">'
        f'<h2 style="color: #C2A59D; margin-top: 0;">{heading}</h2>'
        f'{body}'
        '</div>'
        '<div style="text-align: center; margin-top: 20px; padding-top: 20px; border-top: 1px solid #E7DCD1;">'
        f'<p style="color: #1C1C1C; font-size: 14px;">{footer_note} '
        f'<a href="mailto:{contact_email}" style="color: #C2A59D;">{contact_email}</a></p>'
        f'<p style="color: #1C1C1C; font-size: 12px; margin-top: 20px;">© {BRAND_NAME}. Todos los derechos reservados.</p>'
        '</div>'
        '</div>'
    )


def render_pending_email(appointment: Dict) -> Tuple[str, str]:
    """Subject and HTML body sent when a booking is received."""
    name = escape(str(appointment.get("name", "")))
    body = (
        '<p style="color: #1C1C1C; line-height: 1.5;">Tu reserva ha sido recibida y está pendiente de confirmación. '
        'A continuación, encontrarás los detalles de tu cita:</p>'
        f'{_details(appointment)}'
        '<p style="color: #1C1C1C; line-height: 1.5;">Uno de nuestros especialistas confirmará tu cita en las '
        'próximas 24 horas. Recibirás otro correo con la confirmación final.</p>'
    )
    html = _layout(f"¡Hola {name}!", body, "Si tienes alguna pregunta, por favor contáctanos a")
    return f"Confirmación de Reserva - {BRAND_NAME}", html


def render_confirmed_email(appointment: Dict) -> Tuple[str, str]:
    """Subject and HTML body sent when an operator confirms a booking."""
    name = escape(str(appointment.get("name", "")))
    address_row = f'<p style="margin: 5px 0;"><strong>Dirección:</strong> {escape(get_studio_address())}</p>'
    body = (
        '<p style="color: #1C1C1C; line-height: 1.5;">Tu cita ha sido '
        '<strong style="color: #C2A59D;">CONFIRMADA</strong>. Te esperamos:</p>'
        f'{_details(appointment, address_row)}'
        '<p style="color: #1C1C1C; line-height: 1.5;">Por favor, llega 10 minutos antes para una mejor experiencia. '
        'Te recordamos evitar usar perfumes el día de tu visita.</p>'
    )
    html = _layout(
        f"¡Buenas noticias, {name}!",
        body,
        "Si necesitas modificar o cancelar tu cita, por favor contáctanos a"
    )
    return f"Cita Confirmada - {BRAND_NAME}", html

"""Display helpers shared by the calendar surfaces."""

from __future__ import annotations

from dataclasses import dataclass

from .days import normalize_key
from .records import PreRegistration, Reservation

_LABELS: dict[str, str] = {
    "reserved": "Reservado",
    "reservation": "Reserva",
    "not available": "Indisponível",
    "airbnb (not available)": "Bloqueado (Airbnb)",
    "booked": "Reservado",
}


@dataclass(frozen=True)
class GuestCount:
    total: int
    label: str
    detailed: bool


def translate_label(label: str | None) -> str:
    """Portuguese display label for common feed summaries."""
    text = normalize_key(label)
    return _LABELS.get(text.lower(), text)


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def _breakdown(adults: int, children: int, babies: int) -> str:
    parts = []
    if adults > 0:
        parts.append(_plural(adults, "adulto", "adultos"))
    if children > 0:
        parts.append(_plural(children, "criança", "crianças"))
    if babies > 0:
        parts.append(_plural(babies, "bebê", "bebês"))
    return ", ".join(parts)


def guest_count(
    reservation: Reservation | None = None,
    pre_registration: PreRegistration | None = None,
) -> GuestCount:
    """Guest total and label for a stay.

    Preference: reservation age breakdown, reservation guest list,
    reservation number_of_guests, pre-registration breakdown, then a
    single guest.
    """
    if reservation is not None:
        counts = (reservation.adults_count, reservation.children_count, reservation.babies_count)
        if any(c is not None for c in counts):
            adults, children, babies = (c or 0 for c in counts)
            total = adults + children + babies
            return GuestCount(total, _breakdown(adults, children, babies) or "0 hóspedes", True)

        if reservation.guests:
            total = len(reservation.guests)
            return GuestCount(total, _plural(total, "hóspede", "hóspedes"), False)

        if reservation.number_of_guests:
            total = reservation.number_of_guests
            return GuestCount(total, _plural(total, "hóspede", "hóspedes"), False)

    if pre_registration is not None:
        adults = pre_registration.adults_count or 0
        children = pre_registration.children_count or 0
        babies = pre_registration.babies_count or 0
        total = adults + children + babies
        if total > 0:
            return GuestCount(total, _breakdown(adults, children, babies), True)

    return GuestCount(1, "1 hóspede", False)

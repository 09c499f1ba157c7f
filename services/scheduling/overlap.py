# ============================================================
# overlap.py - Chevauchement de créneaux
# ------------------------------------------------------------
# Intervalles semi-ouverts [start, end) : deux réunions dos à dos
# (fin de l'une == début de l'autre) ne se chevauchent pas.
# Toute détection de conflit passe par ce prédicat.
# ============================================================
from datetime import datetime


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    return a_start < b_end and b_start < a_end

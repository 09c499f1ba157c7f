# ============================================================
# codes.py - Génération des codes d'accès
# ------------------------------------------------------------
# Deux espaces de codes indépendants :
#   - salle   : 6 chiffres dans [100000, 999999] (saisi sur la tablette)
#   - réunion : 12 caractères [A-Z0-9] (annulation / consultation)
#
# La source d'aléa est injectée (random.Random) : les tests peuvent
# fournir un générateur déterministe. La vérification d'existence et
# l'insertion ne sont pas atomiques ; l'index unique en base reste
# le vrai garde-fou (voir repository.DuplicateCode).
# ============================================================
import logging
import random
import string

from services.scheduling.config import CODE_MAX_ATTEMPTS
from services.scheduling.errors import CodeSpaceExhausted

logger = logging.getLogger(__name__)

ROOM = "room"
MEETING = "meeting"

MEETING_ALPHABET = string.ascii_uppercase + string.digits
MEETING_CODE_LENGTH = 12


class AccessCodeGenerator:
    def __init__(self, rng=None, max_attempts: int = CODE_MAX_ATTEMPTS):
        self.rng = rng or random.SystemRandom()
        self.max_attempts = max_attempts

    def generate(self, kind: str) -> str:
        if kind == ROOM:
            return str(self.rng.randint(100000, 999999))
        if kind == MEETING:
            return "".join(self.rng.choice(MEETING_ALPHABET) for _ in range(MEETING_CODE_LENGTH))
        raise ValueError(f"unknown access code kind: {kind}")

    # exists : callable(code) -> bool, en pratique repo.access_code_exists
    def generate_unique(self, kind: str, exists) -> str:
        for attempt in range(1, self.max_attempts + 1):
            code = self.generate(kind)
            if not exists(code):
                return code
            logger.debug("%s access code collision (attempt %d/%d)", kind, attempt, self.max_attempts)
        raise CodeSpaceExhausted(
            f"could not generate a unique {kind} access code after {self.max_attempts} attempts"
        )

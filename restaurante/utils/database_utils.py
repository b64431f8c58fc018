from datetime import datetime
from zoneinfo import ZoneInfo

from restaurante.config.settings import TIMEZONE_PADRAO


def now_trimmed(*, tz_name: str | None = None):
    """Retorna datetime atual no fuso da empresa (padrão São Paulo), sem microsegundos"""
    tz = ZoneInfo(tz_name or TIMEZONE_PADRAO)
    return datetime.now(tz).replace(microsecond=0)

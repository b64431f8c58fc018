"""
Estimativa de tempo de preparo.

Dois modos, escolhidos na configuração da empresa:
- manual: devolve os minutos configurados;
- auto_daily: média de (pronto − confirmado) dos pedidos recentes, com
  fallback hoje → ontem → últimos 30 dias → 30 minutos.

O cálculo (`estimar_tempo_preparo`) é puro; o serviço só busca os dados.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from restaurante.api.empresas.repositories.repo_empresa import EmpresaRepository
from restaurante.api.pedidos.models.model_pedido import StatusPedido
from restaurante.api.pedidos.repositories.repo_pedidos import PedidoRepository
from restaurante.api.pedidos.services.status_flow import STATUS_CONCLUIDOS_PREPARO, STATUS_PRONTOS
from restaurante.api.shared.schemas.schema_shared_enums import ModoTempoPreparoEnum
from restaurante.utils.database_utils import now_trimmed
from restaurante.utils.logger import logger

TEMPO_PADRAO_MINUTOS = 30
TEMPO_ENTREGA_PADRAO_MINUTOS = 30
AMOSTRA_MINIMA_MINUTOS = 1
AMOSTRA_MAXIMA_MINUTOS = 180
DIAS_HISTORICO = 30

JANELA_HOJE = "hoje"
JANELA_ONTEM = "ontem"
JANELA_30_DIAS = "ultimos_30_dias"
JANELA_PADRAO = "padrao"


@dataclass(frozen=True)
class RegistroStatus:
    status: str
    created_at: datetime


@dataclass
class AmostraPedido:
    """Pedido candidato com o histórico de status necessário para a medição."""
    pedido_id: int
    status: str
    created_at: datetime
    historico: list[RegistroStatus] = field(default_factory=list)


@dataclass(frozen=True)
class ConfigTempoPreparo:
    modo: str = ModoTempoPreparoEnum.AUTO_DIARIO.value
    tempo_preparo_manual: Optional[int] = None
    tempo_entrega_manual: Optional[int] = None


@dataclass(frozen=True)
class JanelaTempo:
    nome: str
    inicio: datetime
    fim: Optional[datetime] = None

    def contem(self, instante: datetime) -> bool:
        if instante < self.inicio:
            return False
        return self.fim is None or instante < self.fim


@dataclass(frozen=True)
class ResultadoTempoPreparo:
    modo: str
    preparo_minutos: int
    entrega_minutos: int
    janela: Optional[str] = None
    amostras: int = 0

    @property
    def total_minutos(self) -> int:
        return self.preparo_minutos + self.entrega_minutos


def _local(instante: datetime, tz: ZoneInfo) -> datetime:
    # Datetime naive vindo do banco já está no horário local da empresa
    if instante.tzinfo is None:
        return instante.replace(tzinfo=tz)
    return instante.astimezone(tz)


def janelas_fallback(agora: datetime, tz: ZoneInfo) -> list[JanelaTempo]:
    """Janelas na ordem em que são tentadas."""
    agora = _local(agora, tz)
    inicio_hoje = datetime.combine(agora.date(), time(0, 0), tzinfo=tz)
    inicio_ontem = inicio_hoje - timedelta(days=1)
    return [
        JanelaTempo(JANELA_HOJE, inicio_hoje),
        JanelaTempo(JANELA_ONTEM, inicio_ontem, inicio_hoje),
        JanelaTempo(JANELA_30_DIAS, agora - timedelta(days=DIAS_HISTORICO)),
    ]


def minutos_preparo(pedido: AmostraPedido) -> Optional[float]:
    """
    Minutos entre o primeiro `confirmed` e o primeiro status de pronto.
    None se faltar alguma das pontas ou se o valor for outlier.
    """
    historico = sorted(pedido.historico, key=lambda h: h.created_at)
    confirmado = next((h for h in historico if h.status == StatusPedido.CONFIRMADO.value), None)
    pronto = next((h for h in historico if h.status in STATUS_PRONTOS), None)
    if confirmado is None or pronto is None:
        return None

    minutos = (pronto.created_at - confirmado.created_at).total_seconds() / 60
    # fora de (1, 180) = erro de digitação, pedido de teste ou status esquecido
    if not (AMOSTRA_MINIMA_MINUTOS < minutos < AMOSTRA_MAXIMA_MINUTOS):
        return None
    return minutos


def media_arredondada(valores: Sequence[float]) -> int:
    media = Decimal(str(sum(valores) / len(valores)))
    return int(media.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def selecionar_janela(
    pedidos: Iterable[AmostraPedido],
    agora: datetime,
    tz: ZoneInfo,
) -> tuple[str, int, int] | None:
    """
    Primeira janela com ao menos uma amostra válida: (nome, média, nº de amostras).
    None quando nenhuma janela tem amostras.
    """
    concluidos = [p for p in pedidos if p.status in STATUS_CONCLUIDOS_PREPARO]
    for janela in janelas_fallback(agora, tz):
        amostras = []
        for pedido in concluidos:
            if not janela.contem(_local(pedido.created_at, tz)):
                continue
            minutos = minutos_preparo(pedido)
            if minutos is not None:
                amostras.append(minutos)
        if amostras:
            return janela.nome, media_arredondada(amostras), len(amostras)
    return None


def estimar_tempo_preparo(
    config: ConfigTempoPreparo,
    pedidos: Iterable[AmostraPedido],
    *,
    agora: datetime,
    timezone: str = "America/Sao_Paulo",
) -> ResultadoTempoPreparo:
    if config.modo == ModoTempoPreparoEnum.MANUAL.value:
        return ResultadoTempoPreparo(
            modo=config.modo,
            preparo_minutos=config.tempo_preparo_manual or TEMPO_PADRAO_MINUTOS,
            entrega_minutos=config.tempo_entrega_manual or TEMPO_ENTREGA_PADRAO_MINUTOS,
        )

    selecionada = selecionar_janela(pedidos, agora, ZoneInfo(timezone))
    if selecionada is None:
        return ResultadoTempoPreparo(
            modo=ModoTempoPreparoEnum.AUTO_DIARIO.value,
            preparo_minutos=TEMPO_PADRAO_MINUTOS,
            entrega_minutos=0,
            janela=JANELA_PADRAO,
        )

    janela, media, n = selecionada
    return ResultadoTempoPreparo(
        modo=ModoTempoPreparoEnum.AUTO_DIARIO.value,
        preparo_minutos=media,
        entrega_minutos=0,
        janela=janela,
        amostras=n,
    )


class TempoPreparoService:
    """Busca configuração e histórico e delega o cálculo para `estimar_tempo_preparo`."""

    def __init__(self, db: Session):
        self.db = db
        self.repo_empresa = EmpresaRepository(db)
        self.repo = PedidoRepository(db)

    def estimate_preparation_time(self, empresa_id: int, *, agora: datetime | None = None) -> ResultadoTempoPreparo:
        empresa = self.repo_empresa.get_or_404(empresa_id)
        config = ConfigTempoPreparo(
            modo=empresa.modo_tempo_preparo or ModoTempoPreparoEnum.AUTO_DIARIO.value,
            tempo_preparo_manual=empresa.tempo_preparo_manual,
            tempo_entrega_manual=empresa.tempo_entrega_manual,
        )
        agora = agora or now_trimmed(tz_name=empresa.timezone)

        amostras: list[AmostraPedido] = []
        if config.modo != ModoTempoPreparoEnum.MANUAL.value:
            desde = _local(agora, ZoneInfo(empresa.timezone)) - timedelta(days=DIAS_HISTORICO)
            pedidos = self.repo.list_concluidos_com_historico(
                empresa_id,
                desde=desde,
                status=STATUS_CONCLUIDOS_PREPARO,
            )
            amostras = [
                AmostraPedido(
                    pedido_id=p.id,
                    status=p.status,
                    created_at=p.created_at,
                    historico=[RegistroStatus(h.status, h.created_at) for h in p.historico],
                )
                for p in pedidos
            ]

        resultado = estimar_tempo_preparo(config, amostras, agora=agora, timezone=empresa.timezone)
        logger.info(
            f"[Tempo Preparo] empresa_id={empresa_id} modo={resultado.modo} "
            f"janela={resultado.janela} amostras={resultado.amostras} preparo={resultado.preparo_minutos}min"
        )
        return resultado

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

from restaurante.utils.database_utils import now_trimmed


@dataclass
class AlvoImpressao:
    """Impressora reservada para um trabalho. Liberada ao fim da impressão ou se a operação falhar."""
    impressora: str
    adquirido_em: datetime = field(default_factory=now_trimmed)
    liberado: bool = False


class IImpressoraContract(ABC):
    """Interface para o transporte até a impressora térmica (agente local, rede etc)."""

    @property
    @abstractmethod
    def conectado(self) -> bool:
        """True se há uma conexão pronta para reuso."""

    @abstractmethod
    def conectar(self) -> None:
        """
        Prepara a conexão. Síncrono e sem I/O de rede: pode ser chamado
        antes de qualquer await.
        """

    @abstractmethod
    async def imprimir(self, impressora: str, conteudo: str) -> None:
        """
        Envia o texto para a impressora.

        Raises:
            PrinterUnavailable: agente fora do ar, impressora inexistente ou recusa.
        """

    @abstractmethod
    async def listar_impressoras(self) -> list[str]:
        pass

    @abstractmethod
    async def desconectar(self) -> None:
        pass

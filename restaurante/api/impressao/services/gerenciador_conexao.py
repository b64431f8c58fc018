from typing import Optional

from restaurante.api.impressao.contracts.impressora_contract import AlvoImpressao, IImpressoraContract
from restaurante.core.exceptions import PrinterUnavailable
from restaurante.utils.logger import logger


class GerenciadorConexaoImpressora:
    """
    Dono da conexão com o transporte de impressão.

    Conecta uma vez e reusa a conexão; depois de uma falha de impressão a
    conexão é descartada e a próxima reserva reconecta. Criado pelo chamador
    (uma instância por aplicação, guardada em `app.state`).
    """

    def __init__(self, adapter: IImpressoraContract, impressora_padrao: Optional[str] = None):
        self.adapter = adapter
        self.impressora_padrao = impressora_padrao
        self.conexoes = 0
        self._alvos_ativos: list[AlvoImpressao] = []

    @property
    def alvos_ativos(self) -> list[AlvoImpressao]:
        return list(self._alvos_ativos)

    def abrir_alvo(self, impressora: Optional[str] = None) -> AlvoImpressao:
        """Reserva a impressora. Síncrono: roda antes de qualquer await do chamador."""
        nome = impressora or self.impressora_padrao
        if not nome:
            raise PrinterUnavailable("Nenhuma impressora configurada")

        if not self.adapter.conectado:
            self.adapter.conectar()
            self.conexoes += 1
            if self.conexoes > 1:
                logger.info(f"[Impressão] Reconectado ao transporte (conexão #{self.conexoes})")

        alvo = AlvoImpressao(impressora=nome)
        self._alvos_ativos.append(alvo)
        return alvo

    def liberar(self, alvo: AlvoImpressao) -> None:
        if alvo.liberado:
            return
        alvo.liberado = True
        if alvo in self._alvos_ativos:
            self._alvos_ativos.remove(alvo)

    async def imprimir(self, alvo: AlvoImpressao, conteudo: str) -> None:
        """Imprime e libera o alvo. Em caso de falha descarta a conexão e repassa PrinterUnavailable."""
        try:
            await self.adapter.imprimir(alvo.impressora, conteudo)
        except PrinterUnavailable:
            await self.adapter.desconectar()
            raise
        finally:
            self.liberar(alvo)

    async def listar_impressoras(self) -> list[str]:
        if not self.adapter.conectado:
            self.adapter.conectar()
            self.conexoes += 1
        try:
            return await self.adapter.listar_impressoras()
        except PrinterUnavailable:
            await self.adapter.desconectar()
            raise

    async def encerrar(self) -> None:
        for alvo in list(self._alvos_ativos):
            self.liberar(alvo)
        await self.adapter.desconectar()

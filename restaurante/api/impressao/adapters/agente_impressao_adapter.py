from typing import Optional

import httpx

from restaurante.api.impressao.contracts.impressora_contract import IImpressoraContract
from restaurante.config import settings
from restaurante.core.exceptions import PrinterUnavailable
from restaurante.utils.logger import logger


class AgenteImpressaoAdapter(IImpressoraContract):
    """
    Adapter para o agente de impressão local (HTTP).

    Endpoints do agente:
      GET  /printers -> {"printers": ["EPSON TM-T20", ...]}
      POST /print    <- {"printer": "...", "format": "plain", "data": "..."}
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.PRINT_AGENT_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.PRINT_AGENT_TIMEOUT_SECONDS
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def conectado(self) -> bool:
        return self._client is not None and not self._client.is_closed

    def conectar(self) -> None:
        if self.conectado:
            return
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )
        logger.info(f"[AgenteImpressao] Cliente criado para {self.base_url}")

    def _get_client(self) -> httpx.AsyncClient:
        if not self.conectado:
            raise PrinterUnavailable("Agente de impressão não conectado")
        return self._client

    async def imprimir(self, impressora: str, conteudo: str) -> None:
        client = self._get_client()
        try:
            response = await client.post(
                "/print",
                json={"printer": impressora, "format": "plain", "data": conteudo},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"[AgenteImpressao] Agente recusou impressão em '{impressora}': "
                f"{e.response.status_code} {e.response.text[:200]}"
            )
            raise PrinterUnavailable(f"Impressora '{impressora}' recusou o trabalho") from e
        except httpx.HTTPError as e:
            logger.warning(f"[AgenteImpressao] Falha de comunicação com {self.base_url}: {e}")
            raise PrinterUnavailable("Agente de impressão indisponível") from e

    async def listar_impressoras(self) -> list[str]:
        client = self._get_client()
        try:
            response = await client.get("/printers")
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"[AgenteImpressao] Falha ao listar impressoras: {e}")
            raise PrinterUnavailable("Agente de impressão indisponível") from e
        data = response.json()
        return [str(p) for p in data.get("printers", [])]

    async def desconectar(self) -> None:
        if self._client is not None:
            await self._client.aclose()
        self._client = None

from .agente_impressao_adapter import AgenteImpressaoAdapter

__all__ = ["AgenteImpressaoAdapter"]

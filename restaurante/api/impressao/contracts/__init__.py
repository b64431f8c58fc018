from .impressora_contract import AlvoImpressao, IImpressoraContract

__all__ = ["AlvoImpressao", "IImpressoraContract"]
